import pytest

from icon_toolkit.core.icon_set import IconSet
from icon_toolkit.core.models.edit_journal import EditJournal
from icon_toolkit.core.services.icon_set_editing_service import IconSetEditingService
from icon_toolkit.core.services.undo_service import UndoService


@pytest.fixture
def make_icon_set():
    def factory(data):
        return IconSet(data)
    return factory


@pytest.fixture
def edit_journal():
    return EditJournal()


@pytest.fixture
def editing_service(edit_journal):
    return IconSetEditingService(journal=edit_journal)


@pytest.fixture
def undo_service():
    return UndoService(max_history=3)
