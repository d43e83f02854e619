# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024 Bjoern Boss Henrichsen
import argparse
import logging
import sys

from . import __version__
from .casing import upperFull, lowerFull, titleFull
from .properties import toDecimalDigit, toDigit
from .database import TypeDatabase, LoadDatabase, SaveDatabase, defaultDatabase
from .generator import BuildDatabase, GeneratorConfig, HostSource, UCDSource
from .ranges import DownloadUCDFiles, UCDBaseUrl

logger = logging.getLogger('unictype')

arg_parser = argparse.ArgumentParser(
	prog='unictype',
	description='Generate and query the compact unicode type record tables.')

arg_parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

arg_parser.add_argument('-v', '--verbose',
						action='store_true',
						default=False,
						help='Report the progress of the generator')

commands = arg_parser.add_subparsers(dest='command', required=True)

generate = commands.add_parser('generate', help='Bake a binary table asset')
generate.add_argument('-o', '--output-file',
					  dest='ofile',
					  required=True,
					  help='Write the asset to OFILE')
generate.add_argument('--ucd',
					  default=None,
					  help='Build from the unicode character database files in UCD instead of the host database')
generate.add_argument('--shift',
					  dest='shifts',
					  type=int,
					  action='append',
					  default=None,
					  help='Restrict the tested index shifts (may be given multiple times)')

download = commands.add_parser('download', help='Fetch the unicode character database files')
download.add_argument('--dir',
					  default='./ucd',
					  help='Store the files in DIR [default: ./ucd]')
download.add_argument('--refresh',
					  action='store_true',
					  default=False,
					  help='Download already cached files again')
download.add_argument('--url',
					  default=UCDBaseUrl,
					  help='Base url of the unicode character database')

query = commands.add_parser('query', help='Print the type record of a code point')
query.add_argument('codepoint',
				   help='Code point as hex value (e.g. 00DF, U+00DF or 0xdf)')
query.add_argument('--database',
				   default=None,
				   help='Use the asset DATABASE instead of the default database')

def ParseCodePoint(value: str) -> int:
	value = value.strip()
	for prefix in ('U+', 'u+', '0x', '0X'):
		if value.startswith(prefix):
			value = value[len(prefix):]
	return int(value, 16)

def FormatQuery(db: TypeDatabase, code: int) -> list[str]:
	record = db.record(code)
	codes = lambda seq: ' '.join(f'{c:04X}' for c in seq)
	return [
		f'code point:   {code:04X}',
		f'record:       {db.lookup(code)}',
		f'flags:        {" ".join(record.flagNames()) or "-"}',
		f'decimal:      {toDecimalDigit(code, db)}',
		f'digit:        {toDigit(code, db)}',
		f'upper:        {codes(upperFull(code, db))}',
		f'lower:        {codes(lowerFull(code, db))}',
		f'title:        {codes(titleFull(code, db))}'
	]

def main(argv: list[str]|None = None) -> int:
	args = arg_parser.parse_args(argv)
	logging.basicConfig(format='%(levelname)s: %(message)s', level=(logging.INFO if args.verbose else logging.WARNING))

	if args.command == 'download':
		DownloadUCDFiles(args.dir, args.refresh, args.url)
		return 0

	if args.command == 'generate':
		source = (HostSource() if args.ucd is None else UCDSource(args.ucd))
		db = BuildDatabase(source, GeneratorConfig(args.shifts))
		SaveDatabase(db, args.ofile)
		logger.info('Wrote [%s] for unicode [%s]', args.ofile, db.unicodeVersion)
		return 0

	try:
		code = ParseCodePoint(args.codepoint)
	except ValueError:
		arg_parser.error(f'invalid code point [{args.codepoint}]')
	db = (defaultDatabase() if args.database is None else LoadDatabase(args.database))
	print('\n'.join(FormatQuery(db, code)))
	return 0

if __name__ == '__main__':
	sys.exit(main())
