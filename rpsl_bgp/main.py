#!/usr/bin/env python3
"""
RPSL BGP - Resolve RPSL routing policy into per-peer route tables

Usage examples:
rpsl-bgp emit -i ripe.db -e juniper -m format=set
rpsl-bgp routes RS-CUSTOMERS -i ripe.db
rpsl-bgp table AS64500 --peer-as 64501 -i ripe.db
cat ripe.db | rpsl-bgp peer-as 64500 192.0.2.1
"""

import argparse
import sys
from typing import List, Optional

from rpsl_bgp import __version__
from rpsl_bgp.emitters import EMITTERS, EmitterKind, get_emitter, list_emitters
from rpsl_bgp.pipeline.workflow import EmitPipeline, load_document
from rpsl_bgp.rpsl.attrs import parse_as_number
from rpsl_bgp.utils.config import ConfigManager, RpslBgpConfig
from rpsl_bgp.utils.logging import get_logger, setup_logging
from rpsl_bgp.utils.error_handling import (
    handle_errors, ErrorFormatter, ParameterValidator, validate_common_args,
    print_error, print_success, print_warning, AttributeParseError, RpslBgpError, ValidationError
)


def setup_app_logging(config: RpslBgpConfig, verbose: bool = False, quiet: bool = False):
    """Configure logging for the application"""
    if quiet:
        level = 'WARNING'
    elif verbose:
        level = 'DEBUG'
    else:
        level = None  # configured level

    setup_logging(config, level=level)


def _parse_as_argument(value: str, parameter_name: str) -> int:
    """Parse an AS number argument: 64500, AS64500 or asdot AS1.10"""
    token = value.strip()
    if token.isdigit():
        token = f"AS{token}"
    try:
        return parse_as_number(token)
    except AttributeParseError as e:
        raise ValidationError(
            e.message,
            parameter_name,
            "Use a plain or asdot AS number (e.g., 64500, AS64500 or AS1.10)"
        ) from e


def _require_aut_num(document, as_number: int):
    aut_num = document.get_aut_num(as_number)
    if aut_num is None:
        raise ValidationError(
            f"aut-num AS{as_number} not found in input",
            "local_as",
            "Check that the input contains the aut-num object and that it parsed"
        )
    return aut_num


@handle_errors('rpsl-bgp.emit')
def cmd_emit(args, config: RpslBgpConfig):
    """Render every aut-num's export tables with the selected emitter"""
    logger = get_logger('rpsl-bgp.emit')

    if args.input:
        config.input.input_path = args.input
    if args.output:
        config.input.output_path = args.output
    if args.strict:
        config.input.strict = True
    if args.emitter:
        config.emitter.name = args.emitter
        config.emitter.arguments = {}
    config.emitter.arguments.update(
        ParameterValidator.parse_key_value_pairs(args.emitter_arguments, "-m")
    )

    emitter = get_emitter(config.emitter.name, config.emitter.arguments)
    logger.info(f"Emitting with {emitter.name} emitter")

    result = EmitPipeline(config, emitter).run()

    if result.errors:
        print_warning(f"Skipped {len(result.errors)} unparseable objects")
    if result.output_path:
        print_success(f"Wrote {result.aut_nums} aut-num tables to {result.output_path}")

    return 0


@handle_errors('rpsl-bgp.routes')
def cmd_routes(args, config: RpslBgpConfig):
    """Print the resolved route entities of a route-set or as-set"""
    document = load_document(config, args.input)

    if document.get_route_set(args.set_name) is None:
        print_warning(f"Set {args.set_name} not found in input, it resolves to no routes")

    for entity in sorted(document.resolve(args.set_name), key=lambda e: e.sort_key()):
        print(entity)

    return 0


@handle_errors('rpsl-bgp.table')
def cmd_table(args, config: RpslBgpConfig):
    """Print the routes an aut-num exports to a peer, an AS, or all peers"""
    local_as = _parse_as_argument(args.local_as, "local_as")
    document = load_document(config, args.input)
    aut_num = _require_aut_num(document, local_as)

    if args.peer_address and args.peer_as is None:
        peer_as = aut_num.get_as_of_peer(args.peer_address)
        if peer_as is None:
            print_error(f"No peering with {args.peer_address} in {aut_num}")
            return 1
        tables = [aut_num.get_table_for_peer(peer_as, args.peer_address)]
    elif args.peer_as is not None:
        peer_as = _parse_as_argument(args.peer_as, "--peer-as")
        if args.peer_address:
            tables = [aut_num.get_table_for_peer(peer_as, args.peer_address)]
        else:
            tables = [aut_num.get_table_for_as(peer_as)]
    else:
        tables = [aut_num.get_table_for_peer(peer.peer_as, peer.peer_address)
                  for peer in aut_num.peers()]

    for table in tables:
        peer = f"AS{table.peer_as}" + (f" {table.peer_address}" if table.peer_address else "")
        routers = f" at {', '.join(table.local_routers)}" if table.local_routers else ""
        print(f"{aut_num} -> {peer}{routers}:")
        for entity in table:
            print(f"  {entity}")

    return 0


@handle_errors('rpsl-bgp.peer-as')
def cmd_peer_as(args, config: RpslBgpConfig):
    """Print the AS number recorded for a peer address"""
    local_as = _parse_as_argument(args.local_as, "local_as")
    document = load_document(config, args.input)
    aut_num = _require_aut_num(document, local_as)

    peer_as = aut_num.get_as_of_peer(args.address)
    if peer_as is None:
        print_error(f"No peering with {args.address} in {aut_num}")
        return 1

    print(f"AS{peer_as}")
    return 0


def cmd_list_emitters(args, config: RpslBgpConfig):
    """List available emitters and their arguments"""
    print("Available emitters: " + ", ".join(list_emitters()))
    for name in list_emitters():
        variant = EMITTERS[EmitterKind(name)]
        default = " (default)" if name == config.emitter.name else ""
        print(f"  {name:<10} {variant.description}{default}")
        for argument, description in variant.valid_arguments.items():
            print(f"      -m {argument}=...  {description}")
    return 0


def create_common_flags_parent():
    """Create a parent parser with common global flags and mutual exclusion groups"""
    parent_parser = argparse.ArgumentParser(add_help=False)

    # Verbose/quiet mutual exclusion
    verbose_group = parent_parser.add_mutually_exclusive_group()
    verbose_group.add_argument('-v', '--verbose', action='store_true',
                               default=argparse.SUPPRESS,
                               help='Enable verbose logging')
    verbose_group.add_argument('-q', '--quiet', action='store_true',
                               default=argparse.SUPPRESS,
                               help='Quiet mode (warnings only)')

    parent_parser.add_argument('--config', metavar='PATH', default=argparse.SUPPRESS,
                               help='Configuration file (JSON)')

    return parent_parser


def create_input_parent():
    """Create a parent parser with the input flag"""
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument('-i', '--input', metavar='FILE',
                               help='RPSL input file (default: stdin)')
    return parent_parser


def create_parser():
    """Create and configure argument parser"""
    common_flags_parent = create_common_flags_parent()
    input_parent = create_input_parent()

    parser = argparse.ArgumentParser(
        prog='rpsl-bgp',
        description='RPSL BGP - Resolve RPSL routing policy into per-peer route tables',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
        parents=[common_flags_parent]
    )

    parser.add_argument('--version', action='version', version=f'rpsl-bgp {__version__}')

    # Subcommands - each inherits common flags for flexible positioning
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # emit subcommand
    emit_parser = subparsers.add_parser('emit',
                                        help='Render export tables with an emitter',
                                        parents=[common_flags_parent, input_parent])
    emit_parser.add_argument('-o', '--output', metavar='FILE',
                             help='Output file (default: stdout)')
    emit_parser.add_argument('-e', '--emitter',
                             help='Emitter used to format output (see list-emitters)')
    emit_parser.add_argument('-m', dest='emitter_arguments', action='append',
                             metavar='KEY=VALUE', default=[],
                             help='Emitter argument, may be repeated')
    emit_parser.add_argument('--strict', action='store_true',
                             help='Fail on the first unparseable object instead of skipping it')

    # routes subcommand
    routes_parser = subparsers.add_parser('routes',
                                          help='Resolve a route-set or as-set',
                                          parents=[common_flags_parent, input_parent])
    routes_parser.add_argument('set_name', help='Set name, e.g. RS-CUSTOMERS')

    # table subcommand
    table_parser = subparsers.add_parser('table',
                                         help='Show the routes an aut-num exports to its peers',
                                         parents=[common_flags_parent, input_parent])
    table_parser.add_argument('local_as', help='Local aut-num, e.g. AS64500')
    table_parser.add_argument('--peer-as', help='Restrict to one peer AS')
    table_parser.add_argument('--peer-address', help='Restrict to one peer address')

    # peer-as subcommand
    peer_as_parser = subparsers.add_parser('peer-as',
                                           help='Look up the AS of a peer address',
                                           parents=[common_flags_parent, input_parent])
    peer_as_parser.add_argument('local_as', help='Local aut-num, e.g. AS64500')
    peer_as_parser.add_argument('address', help='Peer address')

    # list-emitters subcommand
    subparsers.add_parser('list-emitters',
                          help='List emitters available to format output',
                          parents=[common_flags_parent])

    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Check if command was provided
    if not args.command:
        parser.print_help()
        return 1

    # Validate common arguments before loading anything
    try:
        args = validate_common_args(args)
        config_manager = ConfigManager(getattr(args, 'config', None))
    except RpslBgpError as e:
        print(ErrorFormatter.format_error(e), file=sys.stderr)
        return 1

    config = config_manager.get_config()
    setup_app_logging(config, getattr(args, 'verbose', False), getattr(args, 'quiet', False))

    for issue in config_manager.validate_config():
        print_warning(f"Configuration: {issue}")

    command_functions = {
        'emit': cmd_emit,
        'routes': cmd_routes,
        'table': cmd_table,
        'peer-as': cmd_peer_as,
        'list-emitters': cmd_list_emitters,
    }

    try:
        return command_functions[args.command](args, config)
    except KeyboardInterrupt:
        print_warning("Operation interrupted by user")
        return 130


if __name__ == '__main__':
    sys.exit(main())
