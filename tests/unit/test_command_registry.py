"""Unit tests for the command registry."""

import pytest

from btaml_editor.commands import HISTORY_COMMANDS, CommandName, create_default_registry
from btaml_editor.models import InvalidArgument, MarkKind, NodeKind, UnknownCommand

from conftest import make_state


@pytest.fixture
def registry():
    return create_default_registry()


class TestCommandRegistry:
    """Tests for command lookup and dispatch."""

    def test_every_editing_command_registered(self, registry):
        """All names except the history commands have handlers."""
        expected = {name.value for name in CommandName if name not in HISTORY_COMMANDS}

        assert set(registry.names()) == expected

    def test_lookup_by_wire_name_and_enum(self, registry):
        assert registry.lookup("toggleBold") is registry.lookup(CommandName.TOGGLE_BOLD)
        assert "setHeading" in registry
        assert "makeItPop" not in registry

    def test_unknown_name(self, registry):
        """Unknown names raise UnknownCommand, an InvalidArgument."""
        with pytest.raises(UnknownCommand) as exc_info:
            registry.lookup("makeItPop")

        assert isinstance(exc_info.value, InvalidArgument)
        assert exc_info.value.details == {"command": "makeItPop"}

    def test_history_commands_have_no_handler(self, registry):
        """Undo and redo belong to the session, not the registry."""
        with pytest.raises(UnknownCommand):
            registry.lookup(CommandName.UNDO)

    def test_apply_with_params(self, hello_doc):
        registry = create_default_registry()
        state = make_state(hello_doc, ((0,), 0), ((0,), 5))

        result = registry.apply(state, "setHeading", {"level": 2})

        assert result.doc.blocks[0].kind == NodeKind.HEADING

    def test_apply_toggle(self, registry, hello_doc):
        state = make_state(hello_doc, ((0,), 0), ((0,), 5))

        result = registry.apply(state, CommandName.TOGGLE_ITALIC)

        assert result.doc.blocks[0].children[0].marks[0].kind == MarkKind.ITALIC

    def test_bad_params(self, registry, hello_doc):
        """Parameters that do not fit the handler are invalid arguments."""
        state = make_state(hello_doc)

        with pytest.raises(InvalidArgument) as exc_info:
            registry.apply(state, "toggleBold", {"colour": "red"})

        assert exc_info.value.details == {"params": ["colour"]}

    def test_missing_params(self, registry, hello_doc):
        with pytest.raises(InvalidArgument):
            registry.apply(make_state(hello_doc), "setLink", {})

    def test_descriptions(self, registry):
        assert registry.lookup("toggleCode").description == "Toggle the code mark"
