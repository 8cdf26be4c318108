"""Entry point for sona CLI client."""

import argparse
import sys

import requests

from cli.api_client import SonaAPIClient
from cli.console import ConsoleUI


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='sona',
        description='Adaptive Estonian vocabulary drill. Start the server first: python run_server.py'
    )
    parser.add_argument('--server', default='http://localhost:8000', help='Server URL (default: %(default)s)')
    parser.add_argument('--user', default='default', help='Learner ID, progress is kept per learner')

    group = parser.add_mutually_exclusive_group()
    group.add_argument('--stats', action='store_true',
                       help='Print level, XP and the words to practice, then exit without drilling')
    group.add_argument('--list-users', action='store_true', help='List learners with stored progress and exit')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    client = SonaAPIClient(base_url=args.server, user_id=args.user)
    ui = ConsoleUI(client)

    if args.list_users or args.stats:
        try:
            if args.list_users:
                for user in client.list_users():
                    print(user)
            else:
                ui.print_status(client.get_status())
                ui.print_struggles(client.get_struggles())
        except requests.RequestException as e:
            print(f"Error: {e}")
            sys.exit(1)
        return

    try:
        ui.run()
    except KeyboardInterrupt:
        ui.finish()
        print('\nGoodbye!')
        sys.exit(0)


if __name__ == '__main__':
    main()
