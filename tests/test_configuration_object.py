"""Test cases for TreeConf configuration object operations.

This module tests path access, saving, loading and comment round trips of
Configuration.
"""

from pathlib import Path
from textwrap import dedent

import pytest

from tests.conftest import write_document
from tests.data.serializables import Marker, Point, Unregistered
from treeconf import (
    ConfigSection,
    Configuration,
    ConfigurationOptions,
    InvalidDocument,
    ObjectNode,
    ReconstructionError,
    TypeRegistry,
    UnregisteredType,
)

SCENARIO = dedent("""\
    # Let's test some comments.
    # Woo!
    someNumber: 123
    a:
      # Just look at this fantastic nest!
      nested:
        # So fancy.
        value: Howdy
    """)


def test_path_style_access_and_modification(config: Configuration):
    """Test path-style access and modification.

    Given an empty configuration
    When setting, reading and deleting values by path
    Then intermediate sections are created and paths resolve through them
    """
    config["server.port"] = 8080
    config["server.host"] = "localhost"

    assert isinstance(config["server"], ConfigSection)
    assert config["server"]["port"] == 8080
    assert config["server.host"] == "localhost"
    assert config["server"].current_path == "server"

    # Defaults and membership
    assert config.get("server.timeout", 30) == 30
    assert "server.port" in config
    assert "server.port.nope" not in config

    # Deletion
    del config["server.host"]
    assert "server.host" not in config
    with pytest.raises(KeyError):
        config["server.host"]


def test_dicts_become_sections(config: Configuration):
    """Test that assigned mappings are stored as nested sections."""
    config["db"] = {"user": "admin", "pool": {"size": 5}}

    assert isinstance(config["db.pool"], ConfigSection)
    assert config["db.pool.size"] == 5
    assert config.to_dict() == {"db": {"user": "admin", "pool": {"size": 5}}}
    assert config.get_values(deep=True) == {"db.user": "admin", "db.pool.size": 5}
    assert list(config.get_values()) == ["db"]


def test_custom_path_separator(registry: TypeRegistry):
    """Test a configuration using '/' between keys."""
    config = Configuration(registry=registry, options=ConfigurationOptions(path_separator="/"))

    config["a/b.c"] = 1
    config.set_comments("a/b.c", "dotted key")

    assert config["a"]["b.c"] == 1
    assert config.save_to_string() == "a:\n  # dotted key\n  b.c: 1\n"


def test_save_scenario(config: Configuration):
    """Test rendering comments above their keys.

    Given values set by path and comments on someNumber, a.nested and a.nested.value
    When saving to a string
    Then each comment block sits immediately above its key, in insertion order
    """
    config["someNumber"] = 123
    config.set_comments("someNumber", "Let's test some comments.", "Woo!")
    config["a.nested.value"] = "Howdy"
    config.set_comments("a.nested", "Just look at this fantastic nest!")
    config.set_comments("a.nested.value", "So fancy.")

    assert config.save_to_string() == SCENARIO


def test_comment_round_trip(config: Configuration):
    """Test that comments survive load followed by save.

    Given a document with comments above a.nested and a.nested.value
    When loading it and saving again
    Then both comments are reproduced above the same paths
    """
    config.load_from_string(SCENARIO)

    assert config.get_comments("a.nested") == ["Just look at this fantastic nest!"]
    assert config.get_comments("a.nested.value") == ["So fancy."]
    assert config.save_to_string() == SCENARIO

    # A second, independent configuration agrees
    again = Configuration(registry=config.registry)
    again.load_from_string(config.save_to_string())
    assert again.save_to_string() == SCENARIO


def test_comments_set_before_load_are_kept(config: Configuration):
    """Test that loading merges document comments into existing ones."""
    config.set_comments("a", "Just testin'")
    config.load_from_string(
        dedent("""\
            a:
              # Just look at this fantastic nest!
              nested:
                # So Fancy.
                value: Howdy
            # Let's test some comments.
            # Woo!
            # WOOOOOOO!
            someNumber: 123
            """)
    )

    assert config.save_to_string() == dedent("""\
        # Just testin'
        a:
          # Just look at this fantastic nest!
          nested:
            # So Fancy.
            value: Howdy
        # Let's test some comments.
        # Woo!
        # WOOOOOOO!
        someNumber: 123
        """)


def test_clearing_comments(config: Configuration):
    """Test removing the comments of a path."""
    config["x"] = 1
    config.set_comments("x", "gone soon")
    config.set_comments("x")

    assert config.get_comments("x") == []
    assert config.save_to_string() == "x: 1\n"


def test_serializable_round_trip(config: Configuration):
    """Test saving and loading serializable objects and sets.

    Given a configuration holding typed objects and a set
    When saving it and loading the text into a new configuration
    Then the typed objects and the set come back equal
    """
    config["spawn"] = Point(1, 2)
    config["markers"] = [Marker("home", Point(3, 4), ["safe"])]
    config["flags"] = {"fast"}

    text = config.save_to_string()
    loaded = Configuration(registry=config.registry)
    loaded.load_from_string(text)

    assert "==: point" in text
    assert loaded["spawn"] == Point(1, 2)
    assert loaded["markers"] == [Marker("home", Point(3, 4), ["safe"])]
    assert loaded["flags"] == {"fast"}


def test_sets_of_tuples_round_trip(config: Configuration):
    """Test sets whose members come back from the document as lists.

    Given sets of tuples and of frozensets
    When saving and loading into a new configuration
    Then the members are tuples and frozensets again
    """
    config["pairs"] = {(1, 2), (3, 4)}
    config["groups"] = {frozenset({"a", "b"}), frozenset()}

    loaded = Configuration(registry=config.registry)
    loaded.load_from_string(config.save_to_string())

    assert loaded["pairs"] == {(1, 2), (3, 4)}
    assert loaded["groups"] == {frozenset({"a", "b"}), frozenset()}


def test_block_scalar_lines_are_not_loaded_as_comments(config: Configuration):
    """Test that a '#' line inside a block scalar is not taken for a comment."""
    config.load_from_string("script: |\n  # run the thing\nafter: 1\n")

    assert config["script"] == "# run the thing\n"
    assert config.get_comments("after") == []
    assert not any(line.startswith("#") for line in config.save_to_string().splitlines())


def test_comment_with_line_break_adds_no_keys(config: Configuration):
    """Test that line breaks inside a comment never become live YAML."""
    config["a"] = 1
    config["b"] = 2
    config.set_comments("b", "first\nsecond: 3")

    loaded = Configuration(registry=config.registry)
    loaded.load_from_string(config.save_to_string())

    assert loaded.to_dict() == {"a": 1, "b": 2}
    assert loaded.get_comments("b") == ["first", "second: 3"]


def test_save_skips_unbuildable_entries(config: Configuration):
    """Test that saving degrades gracefully.

    Given a configuration with one value of an unregistered type
    When saving
    Then the other values are written and the failure is reported
    """
    config["one"] = 1
    config["two"] = Unregistered()
    config["three"] = 3

    assert config.save_to_string() == "one: 1\nthree: 3\n"
    assert len(config.last_build_failures) == 1
    assert isinstance(config.last_build_failures[0].error, UnregisteredType)


def test_document_tree_boundary(config: Configuration):
    """Test to_document_tree and from_document_tree directly."""
    tree = config.to_document_tree({"b": 1, "a": [Point(0, 1)]})

    assert isinstance(tree, ObjectNode)
    assert list(tree.keys()) == ["b", "a"]
    assert config.from_document_tree(tree) == {"b": 1, "a": [Point(0, 1)]}


def test_load_replaces_top_level_keys(config: Configuration):
    """Test that loaded top-level keys replace existing ones and others stay."""
    config["keep"] = True
    config["a.old"] = 1

    config.load_from_string("a:\n  new: 2\n")

    assert config.to_dict() == {"keep": True, "a": {"new": 2}}


def test_load_failures_are_loud(config: Configuration):
    """Test discriminator and document failures on load.

    Given documents with an unknown alias, a non-mapping root or broken syntax
    When loading them
    Then an error is raised and the configuration is left untouched
    """
    config["keep"] = 1

    with pytest.raises(ReconstructionError):
        config.load_from_string("thing:\n  ==: ghost\n  x: 1\n")
    with pytest.raises(InvalidDocument):
        config.load_from_string("- 1\n- 2\n")
    with pytest.raises(InvalidDocument):
        config.load_from_string("a: [1\n")

    assert config.to_dict() == {"keep": 1}
    assert len(config.comments) == 0


def test_load_empty_text(config: Configuration):
    """Test that empty text is a no-op."""
    config["x"] = 1
    config.load_from_string("")

    assert config.to_dict() == {"x": 1}


def test_file_save_and_load(config: Configuration, temp_dir: Path):
    """Test saving to and loading from files."""
    config["someNumber"] = 123
    config.set_comments("someNumber", "hello")
    config_path = temp_dir / "nested" / "config.yaml"

    config.save(config_path)
    loaded = Configuration.load_configuration(config_path, registry=config.registry)

    assert config_path.read_text(encoding="utf-8") == "# hello\nsomeNumber: 123\n"
    assert loaded.to_dict() == {"someNumber": 123}
    assert loaded.get_comments("someNumber") == ["hello"]


def test_load_configuration_from_missing_or_written_file(temp_dir: Path):
    """Test load_configuration with a missing file and with a hand-written one."""
    missing = Configuration.load_configuration(temp_dir / "missing.yaml", registry=TypeRegistry())
    assert len(missing) == 0

    config_path = temp_dir / "config.yaml"
    write_document(config_path, "tags:\n  ==: set\n  values: [a, b]\n")
    config = Configuration.load_configuration(config_path, registry=TypeRegistry())
    assert config["tags"] == {"a", "b"}
