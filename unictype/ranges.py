# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024 Bjoern Boss Henrichsen
import logging
import os
import re
import urllib.request

logger = logging.getLogger(__name__)

# ranges are lists of range-objects, which must be sorted and must not overlap/neighbor each other if same type
#	=> use Ranges.fromRawList to sort and merge an arbitrary list of Range objects
# ranges map [first-last] to a non-empty tuple of values
class Range:
	RangeFirst: int = 0
	RangeLast: int = 0x10ffff

	def __init__(self, first: int, last: int, values: tuple|int) -> None:
		if type(values) == int:
			values = (values,)
		if first < Range.RangeFirst or last > Range.RangeLast or first > last:
			raise RuntimeError(f'Malformed range [{first:05x}-{last:05x}] encountered')
		if type(values) != tuple or len(values) == 0:
			raise RuntimeError('Malformed values encountered')
		self.first = first
		self.last = last
		self.values = values
	def __str__(self) -> str:
		return f'[{self.first:05x}-{self.last:05x}/{self.span()}] -> {self.values}'
	def __repr__(self) -> str:
		return self.__str__()
	def __eq__(self, other: object) -> bool:
		return isinstance(other, Range) and (self.first, self.last, self.values) == (other.first, other.last, other.values)
	def merge(self, other: 'Range') -> 'Range':
		if self.values != other.values:
			raise RuntimeError('Cannot merge ranges of different value')
		return Range(min(self.first, other.first), max(self.last, other.last), self.values)
	def span(self) -> int:
		return (self.last - self.first + 1)
	def neighbors(self, other: 'Range') -> bool:
		return (self.last + 1 == other.first or self.first - 1 == other.last)
	def overlap(self, other: 'Range') -> bool:
		return (self.last >= other.first and self.first <= other.last)

class Ranges:
	@staticmethod
	def _appOrMerge(out: list[Range], other: Range) -> None:
		if len(out) > 0 and (out[-1].overlap(other) or (out[-1].neighbors(other) and out[-1].values == other.values)):
			out[-1] = out[-1].merge(other)
		else:
			out.append(other)

	@staticmethod
	def fromRawList(ranges: list[Range]) -> list[Range]:
		# sort the ranges
		ranges = sorted(ranges, key=lambda r : r.first)

		# merge any neighboring/overlapping ranges of the same type
		out: list[Range] = []
		for r in ranges:
			Ranges._appOrMerge(out, r)
		return out
	@staticmethod
	def wellFormed(ranges: list[Range]) -> None:
		for i in range(1, len(ranges)):
			if ranges[i - 1].first > ranges[i].first:
				raise RuntimeError('Order of ranges violation encountered')
			if ranges[i - 1].last + 1 > ranges[i].first:
				raise RuntimeError('Overlapping ranges encountered')
	@staticmethod
	def lookup(ranges: list[Range], pos: int) -> tuple|None:
		left, right = 0, len(ranges) - 1
		while left <= right:
			center = (left + right) // 2
			if pos < ranges[center].first:
				right = center - 1
			elif pos > ranges[center].last:
				left = center + 1
			else:
				return ranges[center].values
		return None

class ParsedFile:
	def _parseLine(self, line: str) -> tuple[bool, int, int, list[str]]|None:
		missing = ('@missing:' in line)

		# check if this is a missing line
		if missing:
			_, line = line.split('@missing:')

		# remove any comments and split the line and strip all entries
		fields = [s.strip() for s in line.split('#')[0].split(';')]

		# validate the field count
		if fields == ['']:
			return None
		if len(fields) < 2:
			raise RuntimeError(f'Line with an invalid field count encountered [{fields[0]}]')
		cp, fields = fields[0], fields[1:]

		# expand the unicode range
		if '..' not in cp:
			return (missing, int(cp, 16), int(cp, 16), fields)
		begin, last = cp.split('..')
		return (missing, int(begin, 16), int(last, 16), fields)
	def _parseFile(self, path: str, legacyRanges: bool) -> None:
		logger.info('Parsing [%s]...', path)

		# open the file for reading and iterate over its lines
		with open(path, 'r', encoding='utf-8') as file:
			legacyState = None
			for line in file:
				# parse the line
				parsed = self._parseLine(line)
				if parsed is None:
					continue
				missing, begin, last, fields = parsed

				# check if a legacy range has been started
				if legacyState is not None:
					if len(fields) == 0 or ', Last>' not in fields[0] or fields[0][:-7] != legacyState[1] or fields[1:] != legacyState[2:]:
						raise RuntimeError(f'Legacy range not closed properly [{begin:06x}]')
					begin = legacyState[0]
					legacyState = None
				elif legacyRanges and len(fields) > 0 and ', First>' in fields[0]:
					legacyState = [begin, fields[0][:-8]] + fields[1:]
					continue

				# check if the line can be ignored, because its empty (i.e. only a comment)
				if len(fields) < 1:
					continue
				self._parsed.append((begin, last, missing, fields))
			if legacyState is not None:
				raise RuntimeError(f'Half-open legacy state encountered [{legacyState[0]:06x}]')
	def __init__(self, path: str, legacyRanges: bool) -> None:
		self._parsed: list[tuple[int, int, bool, list[str]]] = []
		self._parseFile(path, legacyRanges)
	def values(self, assignValue, ignoreMissing: bool = False) -> list[Range]:
		ranges: list[Range] = []

		# iterate over the parsed lines and match them against the callback
		for (begin, last, missing, fields) in self._parsed:
			if missing and ignoreMissing:
				continue
			value = assignValue(fields)
			if value is None:
				continue
			if not missing:
				ranges.append(Range(begin, last, value))
			else:
				raise RuntimeError('Unexpected missing default-value')
		return Ranges.fromRawList(ranges)
	def entries(self, assignValue) -> list[tuple[int, int, tuple]]:
		out: list[tuple[int, int, tuple]] = []

		# unlike values, overlapping entries are kept apart (used for multi-valued single code points)
		for (begin, last, missing, fields) in self._parsed:
			if missing:
				continue
			value = assignValue(fields)
			if value is not None:
				out.append((begin, last, value))
		return out

# files of the unicode character database required to build the type records
UCDFiles: dict[str, str] = {
	'ReadMe': 'ReadMe.txt',
	'UnicodeData': 'UnicodeData.txt',
	'DerivedCoreProperties': 'DerivedCoreProperties.txt',
	'SpecialCasing': 'SpecialCasing.txt',
	'DerivedNumericType': 'extracted/DerivedNumericType.txt'
}
UCDOptional: list[str] = ['ReadMe', 'DerivedNumericType']
UCDBaseUrl = 'https://www.unicode.org/Public/UCD/latest/ucd'

def UCDPath(dirPath: str, file: str) -> str:
	return os.path.join(dirPath, *UCDFiles[file].split('/'))

# download all relevant files from the unicode character database (only if they should be refreshed or do not exist yet)
def DownloadUCDFiles(dirPath: str, refreshFiles: bool = False, baseUrl: str = UCDBaseUrl) -> dict[str, str]:
	mapping: dict[str, str] = {}
	for file in UCDFiles:
		url, path = f'{baseUrl}/{UCDFiles[file]}', UCDPath(dirPath, file)
		mapping[file] = path

		if not refreshFiles and os.path.isfile(path):
			continue
		os.makedirs(os.path.dirname(path), exist_ok=True)
		logger.info('downloading [%s] to [%s]...', url, path)
		urllib.request.urlretrieve(url, path)
	return mapping

# fetch the version from the read-me
def ReadUCDVersion(dirPath: str) -> str:
	path = UCDPath(dirPath, 'ReadMe')
	if not os.path.isfile(path):
		return ''
	with open(path, 'r', encoding='utf-8') as f:
		fileContent = f.read()
	version = re.findall('Version ([0-9]+(\\.[0-9]+)*) of the Unicode Standard', fileContent)
	if len(version) != 1:
		raise RuntimeError('Unable to extract the version')
	return version[0][0]
