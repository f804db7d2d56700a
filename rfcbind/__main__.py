# -*- coding: utf-8 -*-
#
# MIT License
#
# Copyright (c) 2026 Joris van de Vis
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
"""
Command line front end.

Examples:
  # Get SDK version
  python -m rfcbind --sdk-version

  # Call a function module
  python -m rfcbind --host saphost --sysnr 00 --client 100 \\
      --user RFC_USER --password secret --func BAPI_COMPANY_GETLIST

  # Call RFC_READ_TABLE
  python -m rfcbind --dest QAS --func RFC_READ_TABLE \\
      --param QUERY_TABLE=USR02 --param DELIMITER="|" --param ROWCOUNT=5

  # Show the parameters of a function module
  python -m rfcbind --dest QAS --func RFC_READ_TABLE --describe
"""

import argparse
import json
import logging
import sys
from decimal import Decimal

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .connection import Connection
from .errors import RfcError, RfcLibError
from .metadata import INTEGER_RANGES, RfcType
from .runtime import get_nwrfclib_version


def build_parser():
    parser = argparse.ArgumentParser(
        prog='rfcbind',
        description='SAP RFC client: call function modules and inspect their metadata',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(__doc__ or '').partition('Examples:')[2],
    )
    parser.add_argument('--sdk-path', help='Path to SAP NW RFC SDK lib directory')
    parser.add_argument('--sdk-version', action='store_true', help='Print SDK version and exit')
    parser.add_argument('--dest', help='Destination from sapnwrfc.ini')
    parser.add_argument('--host', help='SAP application server hostname')
    parser.add_argument('--sysnr', default='00', help='System number (default: 00)')
    parser.add_argument('--client', default='100', help='Client number (default: 100)')
    parser.add_argument('--user', help='SAP username')
    parser.add_argument('--password', help='SAP password')
    parser.add_argument('--lang', default='EN', help='Login language (default: EN)')
    parser.add_argument('--func', help='Function module to call')
    parser.add_argument('--param', action='append', default=[],
                        help='Import parameter as NAME=VALUE (repeatable)')
    parser.add_argument('--describe', action='store_true',
                        help='Print the parameters of --func instead of calling it')
    parser.add_argument('--return-import-params', action='store_true',
                        help='Include IMPORT parameters in the result')
    parser.add_argument('--no-rstrip', action='store_true',
                        help='Keep trailing blanks of CHAR results')
    parser.add_argument('-v', '--verbose', action='store_true')
    return parser


def parse_params(items):
    """NAME=VALUE strings to a dict of str."""
    params = {}
    for item in items:
        if '=' not in item:
            raise ValueError('expected NAME=VALUE, got %r' % item)
        name, value = item.split('=', 1)
        params[name] = value
    return params


def typed_params(func_desc, params):
    """Convert command line values of integer parameters to int.

    Other values stay str.
    """
    typed = {}
    for name, value in params.items():
        param = func_desc.parameter(name)
        if param is not None and param.parameter_type in INTEGER_RANGES:
            try:
                value = int(value)
            except ValueError:
                pass
        typed[name] = value
    return typed


def _serialize(obj):
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, bytes):
        return obj.hex()
    raise TypeError('Not serializable: %s' % type(obj))


def describe_table(func_desc):
    table = Table(title='Function %s' % func_desc.name, show_lines=True)
    table.add_column('Parameter', style='cyan')
    table.add_column('Direction', style='green')
    table.add_column('Type', style='yellow')
    table.add_column('Length', justify='right')
    table.add_column('Dec', justify='right')
    table.add_column('Optional')
    table.add_column('Default', style='dim')
    table.add_column('Text', style='dim', max_width=40)
    for param in func_desc.parameters:
        type_name = param.parameter_type.name
        if param.parameter_type in (RfcType.STRUCTURE, RfcType.TABLE) and param.type_description:
            type_name += ' ' + param.type_description.name
        table.add_row(
            param.name, param.direction.name, escape(type_name),
            '%d/%d' % (param.nuc_length, param.uc_length), str(param.decimals),
            'yes' if param.optional else '', escape(param.default_value),
            escape(param.parameter_text),
        )
    return table


def main(argv=None, runtime=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    console = Console()

    if runtime is None and (args.sdk_version or args.func):
        from .sdk import NwRfcRuntime
        try:
            runtime = NwRfcRuntime.get(args.sdk_path)
        except RfcLibError as e:
            console.print('[red]Error:[/red] %s' % escape(str(e)))
            return 1

    if args.sdk_version:
        major, minor, patch = get_nwrfclib_version(runtime)
        console.print('SAP NW RFC SDK version: %d.%d.%d' % (major, minor, patch))
        return 0

    if not args.func:
        parser.error('--func is required')
    if args.dest:
        conn_params = {'dest': args.dest}
    elif args.host and args.user and args.password:
        conn_params = {
            'ashost': args.host, 'sysnr': args.sysnr, 'client': args.client,
            'user': args.user, 'passwd': args.password, 'lang': args.lang,
        }
    else:
        parser.error('--dest, or --host, --user and --password, are required for RFC calls')

    try:
        import_params = parse_params(args.param)
    except ValueError as e:
        parser.error(str(e))

    try:
        with Connection(conn_params, runtime=runtime, rstrip=not args.no_rstrip,
                        return_import_params=args.return_import_params) as conn:
            func_desc = conn.get_function_description(args.func)
            if args.describe:
                console.print(describe_table(func_desc))
            else:
                result = conn.call(func_desc, typed_params(func_desc, import_params))
                console.out(json.dumps(result, indent=2, default=_serialize, ensure_ascii=False))
    except RfcError as e:
        console.print('[red]RFC Error:[/red] %s' % escape(e.description))
        if e.message:
            console.print('  Message: %s' % escape(e.message))
        if e.key:
            console.print('  Key: %s' % escape(e.key))
        return 1
    except RfcLibError as e:
        console.print('[red]Error:[/red] %s' % escape(str(e)))
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
