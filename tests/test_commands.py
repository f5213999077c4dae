"""
Tests for commands.py - handlers with an injected registry store.
"""

import unittest
from unittest.mock import MagicMock

from joker.commands import EXIT_ERROR, EXIT_OK, handle_add, handle_checkout
from joker.core.registry import DaemonAddress, RegistryState, add_daemon
from joker.errors import ConfigUnwritable
from joker.ui.output import UIManager


class TestHandlers(unittest.TestCase):

    def setUp(self):
        self.state, _ = add_daemon(RegistryState(), "west", "127.0.0.1", "9000")
        self.store = MagicMock()
        self.store.load_or_empty.return_value = self.state
        self.ui = MagicMock(spec=UIManager)

    def test_add_existing_name_still_saves_unchanged_state(self):
        code = handle_add(self.store, "west", "10.0.0.1", "1", ui=self.ui)

        self.assertEqual(code, EXIT_OK)
        self.store.save.assert_called_once()
        saved = self.store.save.call_args[0][0]
        self.assertEqual(saved.daemons["west"], DaemonAddress.parse("127.0.0.1", "9000"))
        self.ui.warning.assert_called_once()

    def test_add_new_name_saves(self):
        code = handle_add(self.store, "east", "10.0.0.2", "9001", ui=self.ui)

        self.assertEqual(code, EXIT_OK)
        saved = self.store.save.call_args[0][0]
        self.assertIn("east", saved.daemons)
        self.ui.success.assert_called_once()

    def test_add_oversized_port_is_invalid_address(self):
        code = handle_add(self.store, "east", "10.0.0.2", "9" * 5000, ui=self.ui)

        self.assertEqual(code, EXIT_ERROR)
        self.store.save.assert_not_called()
        self.assertIn("invalid port", self.ui.error.call_args[0][0])

    def test_checkout_reports_unwritable_registry(self):
        self.store.save.side_effect = ConfigUnwritable("cannot write registry")

        code = handle_checkout(self.store, "west", ui=self.ui)

        self.assertEqual(code, EXIT_ERROR)
        self.ui.success.assert_not_called()
        self.assertIn("cannot write registry", self.ui.error.call_args[0][0])


if __name__ == "__main__":
    unittest.main()
