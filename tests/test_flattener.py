"""Tests for node classification and tree flattening."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.create_sample_workbook import create_motor_workbook, create_sample_workbook
from excel_to_schema.builder import build_tree
from excel_to_schema.errors import MissingPageError
from excel_to_schema.flattener import (
    NodeKind,
    classify,
    flatten,
    flatten_config,
)
from excel_to_schema.model import Leaf, Node, NodeConfig, PageSet, Reference
from excel_to_schema.workbook import OpenpyxlGridSource

DATA_TYPES = ["Int", "Float", "Bool", "String"]


def _leaf(name, template, basic="Int", description=""):
    return Node(name, Leaf(basic), template=template, description=description)


def _ref(name, template, target, children):
    node = Node(name, Reference(target), template=template)
    node.children = list(children)
    return node


def _rows(page):
    return [(c.tag_name, c.data_type) for c in page.rows]


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------

class TestClassify:
    def test_leaf_is_simple(self):
        info = classify(_leaf("Speed", "Main", description="rpm"))
        assert info.kind is NodeKind.SIMPLE
        assert info.simple_type == "Int"
        assert info.description == "rpm"

    def test_child_sharing_template_is_object_level(self):
        group = Node("Plant", template="Main")
        group.add_child(_leaf("Speed", "Main"))
        group.add_child(_ref("Motor", "Main", "MotorDef", [_leaf("RPM", "MotorDef")]))
        assert classify(group).kind is NodeKind.OBJECT_LEVEL

    def test_one_shared_child_is_enough(self):
        group = Node("Plant", template="Main")
        group.add_child(_leaf("RPM", "MotorDef"))
        group.add_child(_leaf("Speed", "Main"))
        assert classify(group).kind is NodeKind.OBJECT_LEVEL

    def test_distinct_child_templates_in_first_seen_order(self):
        node = Node("Mixed", template="Main")
        for name, template in [("a", "B"), ("b", "A"), ("c", "B"), ("d", "C")]:
            node.add_child(_leaf(name, template))
        info = classify(node)
        assert info.kind is NodeKind.COMPLEX
        assert info.complex_types == ["B", "A", "C"]

    def test_every_built_node_has_one_kind(self, tmp_path):
        path = create_sample_workbook(str(tmp_path / "sample.xlsx"))
        with OpenpyxlGridSource.from_file(path) as source:
            config = build_tree(source, "OPC Config Model", ["WC1", "WC2"], DATA_TYPES)
        for node in config.walk():
            kind = classify(node).kind
            assert kind in NodeKind
            if node.children:
                assert kind is not NodeKind.SIMPLE
            else:
                assert kind is NodeKind.SIMPLE


# ---------------------------------------------------------------------------
# flatten
# ---------------------------------------------------------------------------

class TestFlatten:
    def test_motor_scenario(self):
        config = build_tree(OpenpyxlGridSource(create_motor_workbook()),
                            "Main", [], DATA_TYPES)
        pages = flatten_config(config, "Main")
        assert pages.names == ["Main", "MotorDef"]
        assert _rows(pages.get("Main")) == [("Speed", "Int"), ("Motor", "MotorDef")]
        assert _rows(pages.get("MotorDef")) == [("RPM", "Int"), ("Torque", "Int")]

    def test_simple_node_needs_its_page(self):
        with pytest.raises(MissingPageError) as exc_info:
            flatten(_leaf("Speed", "Main"), PageSet())
        assert exc_info.value.page_name == "Main"

    def test_single_node_accepted(self):
        pages = PageSet(["Main"])
        flatten(_leaf("Speed", "Main", description="rpm"), pages)
        column = pages.get("Main").rows[0]
        assert (column.tag_name, column.data_type, column.description) == (
            "Speed", "Int", "rpm")
        assert column.ancestor_labels == []

    def test_object_level_labels_accumulate(self):
        plant = Node("Plant", template="Main", description="Site")
        line = plant.add_child(Node("Line", template="Main"))
        line.add_child(_leaf("Speed", "Main"))
        pages = flatten([plant], PageSet(["Main"]))
        (speed,) = pages.get("Main").rows
        assert speed.ancestor_labels == ["Plant", "Site", "Line", ""]

    def test_labels_copied_not_shared(self):
        plant = Node("Plant", template="Main")
        a = plant.add_child(_leaf("A", "Main"))
        b = plant.add_child(_leaf("B", "Main"))
        flatten([plant], PageSet(["Main"]))
        assert a.ancestor_labels == [("Plant", "")]
        assert b.ancestor_labels == [("Plant", "")]
        assert a.ancestor_labels is not b.ancestor_labels

    def test_complex_reference_columns_carry_labels(self):
        plant = Node("Plant", template="Main")
        plant.add_child(_ref("Motor", "Main", "MotorDef", [_leaf("RPM", "MotorDef")]))
        pages = flatten([plant], PageSet(["Main"]))
        (motor,) = pages.get("Main").rows
        assert (motor.tag_name, motor.data_type) == ("Motor", "MotorDef")
        assert motor.ancestor_labels == ["Plant", ""]
        # labels stop at a complex node
        (rpm,) = pages.get("MotorDef").rows
        assert rpm.ancestor_labels == []

    def test_one_reference_column_per_distinct_template(self):
        mixed = Node("Mixed", template="Main")
        mixed.add_child(_leaf("a", "A"))
        mixed.add_child(_leaf("b", "B"))
        mixed.add_child(_leaf("c", "A"))
        pages = flatten([mixed], PageSet(["Main"]))
        assert _rows(pages.get("Main")) == [("Mixed", "A"), ("Mixed", "B")]
        assert _rows(pages.get("A")) == [("a", "Int"), ("c", "Int")]
        assert _rows(pages.get("B")) == [("b", "Int")]

    def test_complex_without_own_page_still_expands(self):
        motor = _ref("Motor", "Nowhere", "MotorDef", [_leaf("RPM", "MotorDef")])
        pages = flatten([motor], PageSet())
        assert pages.names == ["MotorDef"]
        assert _rows(pages.get("MotorDef")) == [("RPM", "Int")]

    def test_existing_pages_skip_children(self):
        first = _ref("M1", "Main", "MotorDef", [_leaf("RPM", "MotorDef")])
        second = _ref("M2", "Main", "MotorDef", [
            _leaf("RPM", "MotorDef"), _leaf("Extra", "MotorDef")])
        pages = flatten([first, second], PageSet(["Main"]))
        assert _rows(pages.get("Main")) == [("M1", "MotorDef"), ("M2", "MotorDef")]
        # second occurrence is not re-expanded, "Extra" is dropped
        assert _rows(pages.get("MotorDef")) == [("RPM", "Int")]

    def test_preexisting_page_prevents_expansion(self):
        motor = _ref("Motor", "Main", "MotorDef", [_leaf("RPM", "MotorDef")])
        pages = PageSet(["Main", "MotorDef"])
        flatten([motor], pages)
        assert pages.get("MotorDef").rows == []
        assert _rows(pages.get("Main")) == [("Motor", "MotorDef")]

    def test_one_new_page_expands_all_children(self):
        node = Node("Mixed", template="Main")
        node.add_child(_leaf("a", "Known"))
        node.add_child(_leaf("b", "Fresh"))
        pages = flatten([node], PageSet(["Main", "Known"]))
        assert _rows(pages.get("Known")) == [("a", "Int")]
        assert _rows(pages.get("Fresh")) == [("b", "Int")]


class TestFlattenConfig:
    def test_seeds_root_page(self):
        config = NodeConfig(nodes=[_leaf("Speed", "Main")])
        pages = flatten_config(config, "Main")
        assert _rows(pages.get("Main")) == [("Speed", "Int")]

    def test_sample_workbook(self, tmp_path):
        path = create_sample_workbook(str(tmp_path / "sample.xlsx"))
        with OpenpyxlGridSource.from_file(path) as source:
            config = build_tree(source, "OPC Config Model", ["WC1", "WC2"], DATA_TYPES)
        pages = flatten_config(config, "OPC Config Model")

        assert pages.names == ["OPC Config Model", "DriveDef", "Alarms"]
        root = pages.get("OPC Config Model")
        assert _rows(root) == [
            ("Status", "Int"), ("Drive", "DriveDef"),
            ("Status", "Int"), ("Drive", "DriveDef"),
            ("Alarms", "Alarms"),
        ]
        assert root.rows[0].ancestor_labels == ["Plant", "", "WC1", ""]
        assert root.rows[2].ancestor_labels == ["Plant", "", "WC2", ""]
        assert root.rows[4].ancestor_labels == []

        drive = pages.get("DriveDef")
        assert _rows(drive) == [("Current", "Float"), ("Enabled", "Bool")]
        assert [c.description for c in drive.rows] == ["PD:WC1:10ab$"] * 2

        alarms = pages.get("Alarms")
        assert _rows(alarms) == [("High", "Bool"), ("Low", "Bool")]
        assert alarms.rows[0].ancestor_labels == ["Group", ""]
