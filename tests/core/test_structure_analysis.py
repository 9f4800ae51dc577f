import pytest

lxml = pytest.importorskip("lxml")
from lxml import etree as ET

from icon_toolkit.core.exceptions import StructuralError
from icon_toolkit.core.models import ReferenceEdge
from icon_toolkit.core.parser.svg_document import SVGDocument
from icon_toolkit.core.services.structure_analysis_service import (
    StructureAnalysisService,
    analyse_svg_structure,
    element_nodes,
    propagate_usage,
)

SVG_NS = 'xmlns="http://www.w3.org/2000/svg"'
XLINK_NS = 'xmlns:xlink="http://www.w3.org/1999/xlink"'


def _svg(content: str) -> SVGDocument:
    return SVGDocument(f'<svg {SVG_NS} {XLINK_NS} viewBox="0 0 24 24">{content}</svg>')


@pytest.fixture
def masked_document():
    # 1 svg, 2 defs, 3 grad, 4 stop, 5 mask, 6 rect, 7 grad2, 8 shape,
    # 9 unused, 10 g, 11 path, 12 use
    return _svg(
        '<defs>'
        '<linearGradient id="grad"><stop offset="0" stop-color="#000"/></linearGradient>'
        '<mask id="m"><rect width="24" height="24" fill="url(#grad2)"/></mask>'
        '<linearGradient id="grad2"/>'
        '<path id="shape" d="M0 0h24v24z"/>'
        '<linearGradient id="unused"/>'
        '</defs>'
        '<g mask="url(#m)"><path d="M1 1h4v4z" fill="url(#grad)"/></g>'
        '<use href="#shape"/>'
    )


class TestTraversal:

    def test_indexes_follow_document_order(self, masked_document):
        structure = analyse_svg_structure(masked_document)
        assert list(structure.elements) == list(range(1, 13))
        tags = [el.tag_name for el in structure.elements.values()]
        assert tags == [
            "svg", "defs", "linearGradient", "stop", "mask", "rect",
            "linearGradient", "path", "linearGradient", "g", "path", "use",
        ]

    def test_parent_indexes(self, masked_document):
        structure = analyse_svg_structure(masked_document)
        assert structure.elements[1].parent_index is None
        assert structure.elements[4].parent_index == 3
        assert structure.elements[11].parent_index == 10
        assert [el.index for el in structure.children_of(10)] == [11]

    def test_comments_are_skipped(self):
        doc = _svg('<!-- comment --><path d="M0 0"/><?pi data?><g/>')
        structure = analyse_svg_structure(doc)
        assert [el.tag_name for el in structure.elements.values()] == ["svg", "path", "g"]

    def test_accepts_bare_lxml_element(self):
        root = ET.fromstring(f'<svg {SVG_NS}><g id="a"/></svg>')
        structure = analyse_svg_structure(root)
        assert structure.ids == {"a": 2}

    def test_element_nodes_match_indexes(self, masked_document):
        nodes = element_nodes(masked_document)
        assert ET.QName(nodes[12]).localname == "use"
        assert nodes[8].get("id") == "shape"

    def test_tree_is_not_modified(self, masked_document):
        before = masked_document.to_string()
        analyse_svg_structure(masked_document)
        assert masked_document.to_string() == before


class TestIdentifiers:

    def test_ids_and_reusable_elements(self, masked_document):
        structure = analyse_svg_structure(masked_document)
        assert structure.ids == {"grad": 3, "m": 5, "grad2": 7, "shape": 8, "unused": 9}

        stop = structure.elements[4]
        assert stop.reusable is not None
        assert stop.reusable.id == "grad"
        assert stop.id is None

        mask = structure.elements[5]
        assert mask.reusable.is_mask is True
        assert structure.elements[6].reusable.id == "m"

    def test_nested_groups(self):
        doc = _svg(
            '<defs><g id="outer"><g id="inner"><path d="M0 0"/></g></g></defs>'
            '<use href="#inner"/>'
        )
        structure = analyse_svg_structure(doc)
        path = structure.elements[5]
        assert [group.id for group in path.belongs_to] == ["outer", "inner"]
        assert path.reusable.id == "outer"
        assert structure.elements[3].group_for("outer").indexes == {3, 4, 5}
        assert structure.elements[4].group_for("inner").indexes == {4, 5}

        # Only the referenced group is rendered
        assert structure.elements[4].used_as_paint is True
        assert structure.elements[5].used_as_paint is True
        assert structure.elements[3].used_as_paint is False
        assert structure.unused_ids() == ["outer"]

    def test_definition_inside_symbol_is_its_own_reusable(self):
        doc = _svg(
            '<defs><symbol id="s"><linearGradient id="g"/><path fill="url(#g)" d="M0 0"/></symbol></defs>'
            '<use href="#s"/>'
        )
        structure = analyse_svg_structure(doc)
        gradient = structure.element_for_id("g")
        assert gradient.reusable.id == "g"
        assert gradient.belongs_to == [gradient.group_for("g")]
        assert structure.elements[5].reusable.id == "s"
        assert gradient.used_as_paint is True

    def test_duplicate_id_fails(self):
        with pytest.raises(StructuralError) as exc_info:
            analyse_svg_structure(_svg('<path id="a" d="M0 0"/><g id="a"/>'))
        assert 'Duplicate id "a"' in str(exc_info.value)

    def test_duplicate_id_in_definitions_fails(self):
        doc = _svg('<defs><linearGradient id="a"/></defs><g><path id="a" d="M0 0"/></g>')
        with pytest.raises(StructuralError):
            analyse_svg_structure(doc)

    def test_definition_without_id_fails(self):
        with pytest.raises(StructuralError) as exc_info:
            analyse_svg_structure(_svg('<defs><path d="M0 0"/></defs>'))
        assert exc_info.value.element == "<path>"

    def test_gradient_without_id_fails(self):
        with pytest.raises(StructuralError):
            analyse_svg_structure(_svg('<linearGradient/>'))

    def test_document_without_ids(self):
        structure = analyse_svg_structure(_svg('<g><path d="M0 0"/></g>'))
        assert structure.ids == {}
        assert structure.links == []
        assert all(el.used_as_paint for el in structure.elements.values())
        assert not any(el.used_as_mask for el in structure.elements.values())


class TestReferences:

    def test_links_in_document_order(self, masked_document):
        structure = analyse_svg_structure(masked_document)
        assert structure.links == [
            ReferenceEdge("grad2", 6, False),
            ReferenceEdge("m", 10, True),
            ReferenceEdge("grad", 11, False),
            ReferenceEdge("shape", 12, False),
        ]
        assert structure.elements[10].links_to == [ReferenceEdge("m", 10, True)]

    def test_filter_is_paint_reference(self):
        doc = _svg('<filter id="f"><feGaussianBlur stdDeviation="1"/></filter><g filter="url(#f)"/>')
        structure = analyse_svg_structure(doc)
        assert structure.links == [ReferenceEdge("f", 4, False)]
        assert structure.elements[2].used_as_paint is True
        assert structure.elements[3].used_as_paint is True
        assert structure.elements[2].used_as_mask is False

    def test_clip_path_is_mask_reference(self):
        doc = _svg('<clipPath id="c"><rect width="1" height="1"/></clipPath><g clip-path="url(#c)"/>')
        structure = analyse_svg_structure(doc)
        assert structure.links == [ReferenceEdge("c", 4, True)]
        assert structure.elements[2].used_as_mask is True
        assert structure.elements[2].used_as_paint is False

    def test_marker_reference(self):
        doc = _svg('<marker id="arrow"><path d="M0 0"/></marker><path d="M0 0" marker-end="url(#arrow)"/>')
        structure = analyse_svg_structure(doc)
        assert structure.links == [ReferenceEdge("arrow", 4, False)]
        assert structure.elements[2].used_as_paint is True

    def test_url_prefix_is_case_insensitive_and_trimmed(self):
        doc = _svg('<linearGradient id="g"/><path d="M0 0" fill="URL(#g )"/>')
        structure = analyse_svg_structure(doc)
        assert structure.links == [ReferenceEdge("g", 3, False)]

    def test_unknown_attributes_are_ignored(self):
        doc = _svg('<linearGradient id="g"/><path d="M0 0" data-ref="url(#g)" fill="#000"/>')
        structure = analyse_svg_structure(doc)
        assert structure.links == []
        assert structure.unused_ids() == ["g"]

    def test_xlink_href(self):
        doc = _svg('<defs><path id="p" d="M0 0"/></defs><use xlink:href="#p"/>')
        structure = analyse_svg_structure(doc)
        assert structure.links == [ReferenceEdge("p", 4, False)]
        assert structure.elements[4].attribs["xlink:href"] == "#p"

    def test_use_without_href_fails(self):
        with pytest.raises(StructuralError) as exc_info:
            analyse_svg_structure(_svg('<use x="1"/>'))
        assert 'Missing "href"' in str(exc_info.value)

    def test_use_with_external_link_fails(self):
        with pytest.raises(StructuralError) as exc_info:
            analyse_svg_structure(_svg('<use href="icons.svg#p"/>'))
        assert "Invalid link" in str(exc_info.value)

    def test_dangling_reference_is_kept(self):
        doc = _svg('<g id="x"/><path d="M0 0" fill="url(#missing)"/>')
        structure = analyse_svg_structure(doc)
        assert structure.dangling_links() == [ReferenceEdge("missing", 3, False)]


class TestUsagePropagation:

    def test_paint_and_mask_classification(self, masked_document):
        structure = analyse_svg_structure(masked_document)
        flags = {
            index: (el.used_as_paint, el.used_as_mask)
            for index, el in structure.elements.items()
        }
        assert flags == {
            1: (True, False),
            2: (False, False),
            3: (True, False),
            4: (True, False),
            5: (False, True),
            6: (False, True),
            7: (False, True),
            8: (True, False),
            9: (False, False),
            10: (True, False),
            11: (True, False),
            12: (True, False),
        }
        assert structure.unused_ids() == ["unused"]

    def test_paint_reference_from_mask_marks_target_as_mask(self):
        doc = _svg(
            '<defs>'
            '<mask id="m"><use href="#shape"/></mask>'
            '<path id="shape" d="M0 0"/>'
            '</defs>'
            '<path d="M0 0" mask="url(#m)"/>'
        )
        structure = analyse_svg_structure(doc)
        shape = structure.element_for_id("shape")
        assert shape.used_as_mask is True
        assert shape.used_as_paint is False

    def test_chain_of_references(self):
        doc = _svg(
            '<defs>'
            '<linearGradient id="base"><stop offset="0"/></linearGradient>'
            '<linearGradient id="derived" href="#base"/>'
            '<pattern id="pat"><rect width="2" height="2" fill="url(#derived)"/></pattern>'
            '</defs>'
            '<path d="M0 0" fill="url(#pat)"/>'
        )
        structure = analyse_svg_structure(doc)
        # <linearGradient href> is not a <use>, so "derived" does not reach "base"
        assert structure.element_for_id("pat").used_as_paint is True
        assert structure.element_for_id("derived").used_as_paint is True
        assert structure.element_for_id("base").used_as_paint is False

    def test_reference_cycle_terminates(self):
        doc = _svg(
            '<defs>'
            '<g id="a"><use href="#b"/></g>'
            '<g id="b"><use href="#a"/></g>'
            '</defs>'
            '<use href="#a"/>'
        )
        structure = analyse_svg_structure(doc)
        assert structure.element_for_id("a").used_as_paint is True
        assert structure.element_for_id("b").used_as_paint is True

    def test_result_is_fixed_point(self, masked_document):
        structure = analyse_svg_structure(masked_document)
        before = {i: (el.used_as_paint, el.used_as_mask) for i, el in structure.elements.items()}
        assert propagate_usage(structure) == 0
        after = {i: (el.used_as_paint, el.used_as_mask) for i, el in structure.elements.items()}
        assert after == before

    def test_repeated_analysis_starts_clean(self, masked_document):
        first = analyse_svg_structure(masked_document)
        second = analyse_svg_structure(masked_document)
        assert first is not second
        assert first.elements[7] is not second.elements[7]
        assert [
            (el.used_as_paint, el.used_as_mask) for el in first.elements.values()
        ] == [
            (el.used_as_paint, el.used_as_mask) for el in second.elements.values()
        ]

    def test_reload_after_edit(self, masked_document):
        analyse_svg_structure(masked_document)
        masked_document.load(masked_document.to_string().replace('fill="url(#grad)"', 'fill="#000"'))
        structure = analyse_svg_structure(masked_document)
        assert structure.element_for_id("grad").used_as_paint is False
        assert sorted(structure.unused_ids()) == ["grad", "unused"]


class TestStructureAnalysisService:

    def test_summary(self, masked_document):
        service = StructureAnalysisService()
        structure = service.analyse(masked_document)
        summary = service.summarize(structure)
        assert summary.elements == 12
        assert summary.ids == 5
        assert summary.links == 4
        assert summary.unused_ids == ["unused"]
        assert summary.dangling_links == 0

    def test_errors_are_propagated(self):
        service = StructureAnalysisService()
        with pytest.raises(StructuralError):
            service.analyse(_svg('<g id="a"/><g id="a"/>'))
