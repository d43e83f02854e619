# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024 Bjoern Boss Henrichsen
import logging
import os
import unicodedata
from collections import namedtuple

from .database import TypeDatabase, CaseBufferSize
from .ranges import ParsedFile, UCDPath, ReadUCDVersion
from .records import TypeRecord, DefaultRecord, ExtendedCaseTable, PackExtendedRef, NoValue, AlphaMask, DecimalMask, DigitMask, LowerMask, LinebreakMask, SpaceMask, TitleMask, UpperMask, XidStartMask, XidContinueMask, PrintableMask, NumericMask, CaseIgnorableMask, CasedMask, ExtendedCaseMask, AllFlagsMask
from .trie import CodePointIndex, CodePointLimit, SplitBins

logger = logging.getLogger(__name__)

# raw properties of a single code point as produced by a source (case mappings are full mappings)
CharProperties = namedtuple('CharProperties', 'code flags decimal digit upper lower title')

class GeneratorConfig:
	def __init__(self, shiftTests: list[int]|None = None, maxExpansion: int = CaseBufferSize) -> None:
		self.shiftTests = (list(range(4, 10)) if shiftTests is None else shiftTests)
		self.maxExpansion = maxExpansion

def _CategoryFlags(code: int, category: str, bidi: str) -> int:
	flags = 0
	if category in ('Ll', 'Lu', 'Lt', 'Lm', 'Lo'):
		flags |= AlphaMask
	if category == 'Lt':
		flags |= TitleMask
	if category == 'Zl' or bidi == 'B':
		flags |= LinebreakMask
	if category == 'Zs' or bidi in ('WS', 'B', 'S'):
		flags |= SpaceMask
	if code == 0x20 or category[0] not in ('C', 'Z'):
		flags |= PrintableMask
	return flags

# properties as known to the running interpreter
class HostSource:
	def __init__(self) -> None:
		self.version = unicodedata.unidata_version

	def __str__(self) -> str:
		return f'host unicode database {self.version}'

	@staticmethod
	def _caseIgnorable(c: str) -> bool:
		# a capital sigma is lowered to its final form, if it is preceded by a cased letter, skipping all case-ignorable code points
		#	=> after a cased letter the final form shows up if c is cased or ignorable, on its own only if c is cased and not ignorable
		afterCased = ('A' + c + '\u03a3').lower()[-1] == '\u03c2'
		alone = (c + '\u03a3').lower()[-1] == '\u03c2'
		return afterCased and not alone

	def _properties(self, code: int, c: str, category: str) -> CharProperties:
		flags = _CategoryFlags(code, category, unicodedata.bidirectional(c))
		decimal, digit = unicodedata.decimal(c, None), unicodedata.digit(c, None)
		if decimal is not None:
			flags |= DecimalMask
		if digit is not None:
			flags |= DigitMask
		if c.isnumeric():
			flags |= NumericMask
		if c.islower():
			flags |= LowerMask
		if c.isupper():
			flags |= UpperMask
		if (flags & (LowerMask | UpperMask | TitleMask)) != 0:
			flags |= CasedMask
		if self._caseIgnorable(c):
			flags |= CaseIgnorableMask

		# the underscore is the only identifier-start accepted by python, which is not XID_Start itself
		if c.isidentifier() and c != '_':
			flags |= XidStartMask
		if ('a' + c).isidentifier():
			flags |= XidContinueMask

		upper, lower, title = tuple(map(ord, c.upper())), tuple(map(ord, c.lower())), tuple(map(ord, c.title()))
		if len(upper) > 1 or len(lower) > 1 or len(title) > 1:
			flags |= ExtendedCaseMask
		return CharProperties(code, flags, (NoValue if decimal is None else decimal), (NoValue if digit is None else digit), upper, lower, title)

	def properties(self):
		for code in range(CodePointLimit):
			c = chr(code)

			# unassigned, private-use and surrogate code points carry no properties
			category = unicodedata.category(c)
			if category in ('Cn', 'Co', 'Cs'):
				continue
			yield self._properties(code, c, category)

# properties as parsed from the text files of the unicode character database
class UCDSource:
	DerivedFlags: dict[str, int] = {
		'Lowercase': LowerMask,
		'Uppercase': UpperMask,
		'Cased': CasedMask,
		'Case_Ignorable': CaseIgnorableMask,
		'XID_Start': XidStartMask,
		'XID_Continue': XidContinueMask
	}

	def __init__(self, dirPath: str) -> None:
		self._dirPath = dirPath
		self.version = ReadUCDVersion(dirPath)

	def __str__(self) -> str:
		return f'unicode character database at [{self._dirPath}]'

	@staticmethod
	def _codes(value: str) -> tuple[int, ...]:
		return tuple(int(u, 16) for u in value.split(' ') if u != '')

	def properties(self):
		unicodeData = ParsedFile(UCDPath(self._dirPath, 'UnicodeData'), True)
		derivedProperties = ParsedFile(UCDPath(self._dirPath, 'DerivedCoreProperties'), False)
		specialCasing = ParsedFile(UCDPath(self._dirPath, 'SpecialCasing'), False)
		flags: dict[int, int] = {}
		values: dict[int, tuple[int, int, int, int, int]] = {}

		# collect the general category based flags, the numeric values and the simple case mappings
		for (first, last, fs) in unicodeData.entries(lambda fs: tuple(fs)):
			if len(fs) < 14:
				raise RuntimeError(f'UnicodeData entry [{first:05x}] with too few fields encountered')
			decimal, digit = (None if fs[5] == '' else int(fs[5])), (None if fs[6] == '' else int(fs[6]))
			for code in range(first, last + 1):
				f = _CategoryFlags(code, fs[1], fs[3])
				f |= (0 if decimal is None else DecimalMask) | (0 if digit is None else DigitMask) | (0 if fs[7] == '' else NumericMask)
				flags[code] = f

				# the titlecase defaults to the uppercase mapping
				upper = (code if fs[11] == '' else int(fs[11], 16))
				lower = (code if fs[12] == '' else int(fs[12], 16))
				title = (upper if fs[13] == '' else int(fs[13], 16))
				values[code] = ((NoValue if decimal is None else decimal), (NoValue if digit is None else digit), upper, lower, title)

		# add the derived core properties
		for name in UCDSource.DerivedFlags:
			for r in derivedProperties.values(lambda fs: (1 if fs[0] == name else None), True):
				for code in range(r.first, r.last + 1):
					flags[code] = flags.get(code, 0) | UCDSource.DerivedFlags[name]

		# the derived numeric types include the numeric values of the unihan database
		numericPath = UCDPath(self._dirPath, 'DerivedNumericType')
		if os.path.isfile(numericPath):
			for r in ParsedFile(numericPath, False).values(lambda fs: (1 if fs[0] in ('Decimal', 'Digit', 'Numeric') else None), True):
				for code in range(r.first, r.last + 1):
					flags[code] = flags.get(code, 0) | NumericMask

		# collect all unconditional special casings [lower, title, upper]
		special: dict[int, tuple] = {}
		for (first, _, fs) in specialCasing.entries(lambda fs: (None if len(fs) > 3 and fs[3] != '' else tuple(fs))):
			special[first] = (self._codes(fs[0]), self._codes(fs[1]), self._codes(fs[2]))

		for code in sorted(set(flags) | set(special)):
			f = flags.get(code, 0)
			decimal, digit, upper, lower, title = values.get(code, (NoValue, NoValue, code, code, code))
			if code in special:
				f |= ExtendedCaseMask
				lowerSeq, titleSeq, upperSeq = special[code]
				yield CharProperties(code, f, decimal, digit, upperSeq, lowerSeq, titleSeq)
			else:
				yield CharProperties(code, f, decimal, digit, (upper,), (lower,), (title,))

class TableBuilder:
	def __init__(self, config: GeneratorConfig) -> None:
		self._config = config
		self._records: dict[TypeRecord, int] = {DefaultRecord: 0}
		self._extended: list[int] = []
		self._sequences: dict[tuple[int, ...], int] = {}
		self._maxExpansion = 1

	def _extend(self, sequence: tuple[int, ...]) -> int:
		if len(sequence) > self._config.maxExpansion:
			raise RuntimeError(f'Case expansion of length [{len(sequence)}] exceeds the maximum [{self._config.maxExpansion}]')

		# share identical sequences within the extended case table
		if sequence not in self._sequences:
			self._sequences[sequence] = len(self._extended)
			self._extended += sequence
		self._maxExpansion = max(self._maxExpansion, len(sequence))
		return PackExtendedRef(self._sequences[sequence], len(sequence))
	def _record(self, props: CharProperties) -> TypeRecord:
		if (props.flags & ~AllFlagsMask) != 0:
			raise RuntimeError(f'Unknown flags [{props.flags:#06x}] for [{props.code:05x}] encountered')
		decimal = (props.decimal if (props.flags & DecimalMask) else NoValue)
		digit = (props.digit if (props.flags & DigitMask) else NoValue)
		if decimal < 0 or decimal > 9 or digit < 0 or digit > 9:
			raise RuntimeError(f'Decimal/digit value of [{props.code:05x}] out of range')

		# extended records reference the full mappings, all others store the delta of the single mapped code point
		if (props.flags & ExtendedCaseMask) != 0:
			return TypeRecord(self._extend(props.upper), self._extend(props.lower), self._extend(props.title), decimal, digit, props.flags)
		for seq in (props.upper, props.lower, props.title):
			if len(seq) != 1:
				raise RuntimeError(f'Multi code point mapping of [{props.code:05x}] without extended case flag')
		return TypeRecord(props.upper[0] - props.code, props.lower[0] - props.code, props.title[0] - props.code, decimal, digit, props.flags)

	def add(self, props: CharProperties) -> int:
		record = self._record(props)
		if record not in self._records:
			self._records[record] = len(self._records)
		return self._records[record]

	def build(self, source) -> TypeDatabase:
		logger.info('Building type records from %s...', source)

		# resolve the record-index of every code point (anything not produced by the source uses the default record)
		data = [0] * CodePointLimit
		for props in source.properties():
			data[props.code] = self.add(props)
		logger.info('Collected [%d] distinct records and [%d] extended case values', len(self._records), len(self._extended))

		shift, index1, index2 = SplitBins(data, self._config.shiftTests)
		logger.info('Split code point index with shift [%d] into [%d/%d] entries', shift, len(index1), len(index2))

		records = tuple(sorted(self._records, key=lambda r: self._records[r]))
		index = CodePointIndex(shift, tuple(index1), tuple(index2))
		return TypeDatabase(index, records, ExtendedCaseTable(tuple(self._extended)), source.version, self._maxExpansion)

def BuildDatabase(source, config: GeneratorConfig|None = None) -> TypeDatabase:
	return TableBuilder(GeneratorConfig() if config is None else config).build(source)
