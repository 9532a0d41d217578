"""
Tests for the command line entry point.
"""
import unittest
from unittest.mock import patch

from inventory_replenishment import main as cli
from inventory_replenishment.exceptions import NotFoundError

class TestCommandLine(unittest.TestCase):
    """Test cases for argument parsing and dispatch."""

    def test_parse_forecast(self):
        args = cli.build_parser().parse_args(['forecast', '3', '--days', '14', '--seed', '42'])

        self.assertEqual(args.command, 'forecast')
        self.assertEqual(args.product_id, 3)
        self.assertEqual(args.days, 14)
        self.assertEqual(args.seed, 42)

    def test_parse_adjust_stock(self):
        args = cli.build_parser().parse_args(['adjust-stock', '1', '5', '--operation', 'add'])
        self.assertEqual((args.product_id, args.quantity, args.operation), (1, 5, 'add'))

    def test_parse_order_analytics(self):
        args = cli.build_parser().parse_args(['order-analytics', '--period-days', '7'])
        self.assertEqual((args.command, args.period_days), ('order-analytics', 7))
        self.assertIn(args.command, cli.COMMANDS)

        self.assertEqual(cli.build_parser().parse_args(['order-analytics']).period_days, 30)

    def test_no_command_prints_help(self):
        with patch('sys.stdout'):
            self.assertEqual(cli.main([]), 1)

    @patch('inventory_replenishment.main.init_application')
    def test_dispatch(self, mock_init):
        with patch.dict(cli.COMMANDS, {'abc': lambda args: None}):
            self.assertEqual(cli.main(['--db-url', 'sqlite://', 'abc']), 0)
        mock_init.assert_called_once_with('sqlite://')

    @patch('inventory_replenishment.main.init_application')
    def test_domain_error_returns_failure(self, mock_init):
        def missing(args):
            raise NotFoundError("Product with ID 9 not found")

        with patch.dict(cli.COMMANDS, {'evaluate': missing}), patch('sys.stderr'):
            self.assertEqual(cli.main(['evaluate', '9']), 1)

if __name__ == '__main__':
    unittest.main()
