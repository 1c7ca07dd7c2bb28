#!/usr/bin/env python3
"""
fprintctl - Fingerprint Daemon Control CLI

Commands:
    list            List fingerprint readers
    info            Show reader properties and enrolled fingers
    enrolled        List enrolled fingers for a user
    verify          Verify a finger against the enrolled prints
    enroll          Enroll a finger

Usage:
    fprintctl list
    fprintctl info --json
    fprintctl enrolled --user alice
    fprintctl verify --finger right-index-finger --timeout 20
    fprintctl enroll left-thumb

Environment:
    FPRINT_BUS            system (default) or session
    FPRINT_BUS_NAME       Daemon bus name
    FPRINT_CALL_TIMEOUT   Method call timeout in seconds
    FPRINT_VERBOSE        Enable verbose logging
    FPRINT_LOG_FILE       Also log to this file

Exit codes:
    0   success (verify matched, enroll completed)
    1   verification failed, enrollment failed, or timed out
    2   daemon or bus error
"""

import argparse
import dataclasses
import json
import sys
from typing import List, Optional

from ..bus import MainLoopThread
from ..config import ClientConfig
from ..device import Device
from ..enums import EnrollStatus, Finger, VerifyStatus
from ..errors import FprintError, NoEnrolledPrintsError
from ..logging_config import configure_from_environment, get_logger
from ..manager import Manager
from ..signals import SignalTimeout

logger = get_logger(__name__)


# ANSI colors
class Colors:
    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    GRAY = '\033[90m'

    @classmethod
    def disable(cls):
        for attr in ['RESET', 'BOLD', 'RED', 'GREEN', 'YELLOW', 'GRAY']:
            setattr(cls, attr, '')


def _manager(args) -> Manager:
    config = ClientConfig.from_environment()
    if args.session:
        config = dataclasses.replace(config, bus_type="session")
    return Manager(config=config)


def _device(manager: Manager, args) -> Device:
    if getattr(args, 'device', None):
        return manager.device(args.device)
    return manager.default_device()


def _enrolled(device: Device, username: Optional[str]) -> List[Finger]:
    try:
        return device.list_enrolled_fingers(username)
    except NoEnrolledPrintsError:
        return []


def cmd_list(args) -> int:
    """List fingerprint readers."""
    devices = _manager(args).devices()
    entries = [{'path': d.object_path, 'name': d.name()} for d in devices]

    if args.json:
        print(json.dumps(entries, indent=2))
        return 0

    if not entries:
        print("No fingerprint readers found.")
        return 0
    for entry in entries:
        print(f"{Colors.BOLD}{entry['path']}{Colors.RESET}  {entry['name']}")
    return 0


def cmd_info(args) -> int:
    """Show reader properties and enrolled fingers."""
    device = _device(_manager(args), args)
    props = device.properties()
    fingers = _enrolled(device, args.user)

    if args.json:
        data = props.to_dict()
        data['path'] = device.object_path
        data['enrolled_fingers'] = [f.value for f in fingers]
        print(json.dumps(data, indent=2))
        return 0

    stages = props.num_enroll_stages if props.num_enroll_stages is not None else "unclaimed"
    print(f"{Colors.BOLD}{device.object_path}{Colors.RESET}")
    print(f"  name={props.name}")
    print(f"  num-enroll-stages={stages}")
    print(f"  scan-type={props.scan_type}")
    print(f"  finger-present={props.finger_present}")
    print(f"  finger-needed={props.finger_needed}")
    print(f"  list-enrolled-fingers={[f.value for f in fingers]}")
    return 0


def cmd_enrolled(args) -> int:
    """List enrolled fingers."""
    device = _device(_manager(args), args)
    fingers = _enrolled(device, args.user)

    if args.json:
        print(json.dumps([f.value for f in fingers]))
        return 0

    if not fingers:
        print("No fingers enrolled.")
        return 0
    for finger in fingers:
        print(finger.value)
    return 0


def _status_color(status) -> str:
    if status in (VerifyStatus.MATCH, EnrollStatus.COMPLETED, EnrollStatus.STAGE_PASSED):
        return Colors.GREEN
    if status.is_retry:
        return Colors.YELLOW
    return Colors.RED


def cmd_verify(args) -> int:
    """Verify a finger."""
    finger = Finger.from_string(args.finger)

    with MainLoopThread():
        device = _device(_manager(args), args)
        with device.claimed(args.user):
            with device.receive_verify_status() as statuses, \
                    device.receive_verify_finger_selected() as selected:
                device.verify_start(finger)
                print(f"Verifying {finger}. Place your finger on the reader...")
                try:
                    while True:
                        try:
                            chosen = selected.get(timeout=0)
                            print(f"{Colors.GRAY}Finger selected: {chosen}{Colors.RESET}")
                        except SignalTimeout:
                            pass
                        status, done = statuses.get(timeout=args.timeout)
                        print(f"{_status_color(status)}{status}{Colors.RESET}")
                        if done:
                            return 0 if status is VerifyStatus.MATCH else 1
                except SignalTimeout:
                    print(f"{Colors.RED}Timed out waiting for the reader.{Colors.RESET}")
                    return 1
                finally:
                    device.verify_stop()


def cmd_enroll(args) -> int:
    """Enroll a finger."""
    finger = Finger.from_string(args.finger)

    with MainLoopThread():
        device = _device(_manager(args), args)
        with device.claimed(args.user):
            stages = device.num_enroll_stages()
            with device.receive_enroll_status() as statuses:
                device.enroll_start(finger)
                print(f"Enrolling {finger}"
                      + (f" ({stages} stages)" if stages else "")
                      + ". Place your finger on the reader...")
                passed = 0
                try:
                    while True:
                        status, done = statuses.get(timeout=args.timeout)
                        if status is EnrollStatus.STAGE_PASSED:
                            passed += 1
                        progress = f" [{passed}/{stages}]" if stages else ""
                        print(f"{_status_color(status)}{status}{Colors.RESET}{progress}")
                        if done:
                            return 0 if status is EnrollStatus.COMPLETED else 1
                except SignalTimeout:
                    print(f"{Colors.RED}Timed out waiting for the reader.{Colors.RESET}")
                    return 1
                finally:
                    device.enroll_stop()


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fprintctl',
        description='Fingerprint Daemon Control CLI',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--session', action='store_true',
                        help='Use the session bus (test daemons)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose logging')
    parser.add_argument('--no-color', action='store_true', help='Disable colors')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # list
    list_parser = subparsers.add_parser('list', help='List fingerprint readers')
    list_parser.add_argument('--json', action='store_true', help='JSON output')
    list_parser.set_defaults(func=cmd_list)

    # info
    info_parser = subparsers.add_parser('info', help='Show reader properties')
    info_parser.add_argument('--device', '-d', help='Device object path (default reader if omitted)')
    info_parser.add_argument('--user', '-u', help='User whose fingers to list')
    info_parser.add_argument('--json', action='store_true', help='JSON output')
    info_parser.set_defaults(func=cmd_info)

    # enrolled
    enrolled_parser = subparsers.add_parser('enrolled', help='List enrolled fingers')
    enrolled_parser.add_argument('--device', '-d', help='Device object path')
    enrolled_parser.add_argument('--user', '-u', help='Username (caller if omitted)')
    enrolled_parser.add_argument('--json', action='store_true', help='JSON output')
    enrolled_parser.set_defaults(func=cmd_enrolled)

    # verify
    verify_parser = subparsers.add_parser('verify', help='Verify a finger')
    verify_parser.add_argument('--finger', '-f', default=Finger.ANY.value,
                               choices=[f.value for f in Finger], help='Finger to verify')
    verify_parser.add_argument('--device', '-d', help='Device object path')
    verify_parser.add_argument('--user', '-u', help='Username (caller if omitted)')
    verify_parser.add_argument('--timeout', '-t', type=_positive_float, default=30.0,
                               help='Seconds to wait for each scan')
    verify_parser.set_defaults(func=cmd_verify)

    # enroll
    enroll_parser = subparsers.add_parser('enroll', help='Enroll a finger')
    enroll_parser.add_argument('finger', choices=[f.value for f in Finger if f is not Finger.ANY])
    enroll_parser.add_argument('--device', '-d', help='Device object path')
    enroll_parser.add_argument('--user', '-u', help='Username (caller if omitted)')
    enroll_parser.add_argument('--timeout', '-t', type=_positive_float, default=30.0,
                               help='Seconds to wait for each scan')
    enroll_parser.set_defaults(func=cmd_enroll)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_from_environment(verbose=args.verbose)

    if args.no_color or not sys.stdout.isatty():
        Colors.disable()

    if not getattr(args, 'func', None):
        parser.print_help()
        return 0

    try:
        result = args.func(args)
    except FprintError as e:
        logger.verbose(f"{args.command} failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 1
    return result if result else 0


if __name__ == "__main__":
    sys.exit(main())
