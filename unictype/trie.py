# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024 Bjoern Boss Henrichsen
CodePointLimit = 0x110000
MaxCodePoint = CodePointLimit - 1

# two-level index: code >> shift selects a block in index1, the block is a slice of index2 holding the record-indices
class CodePointIndex:
	def __init__(self, shift: int, index1: tuple[int, ...], index2: tuple[int, ...]) -> None:
		if shift < 0 or shift > 16:
			raise RuntimeError(f'Unsupported index shift [{shift}] encountered')
		self._shift = shift
		self._mask = (1 << shift) - 1
		self._index1 = index1
		self._index2 = index2

	@property
	def shift(self) -> int:
		return self._shift
	@property
	def index1(self) -> tuple[int, ...]:
		return self._index1
	@property
	def index2(self) -> tuple[int, ...]:
		return self._index2
	def blockCount(self) -> int:
		return len(self._index2) >> self._shift

	def lookup(self, code: int) -> int:
		# anything outside of the code point space resolves to the default record
		if code < 0 or code >= CodePointLimit:
			return 0
		block = self._index1[code >> self._shift]
		return self._index2[(block << self._shift) | (code & self._mask)]

def _TrySplit(data: list[int], shift: int) -> tuple[list[int], list[int]]:
	index1: list[int] = []
	index2: list[int] = []
	blockMap: dict[tuple, int] = {}
	count = (1 << shift)

	# split the data into blocks of the given size and share all identical blocks
	for i in range(0, len(data), count):
		block = tuple(data[i:i + count])
		if len(block) < count:
			block = block + (0,) * (count - len(block))

		# lookup the block-id and append the block if it has not been seen yet
		if block not in blockMap:
			blockMap[block] = len(blockMap)
			index2 += block
		index1.append(blockMap[block])
	return (index1, index2)

def SplitBins(data: list[int], shiftTests: list[int], maxEntry: int = 0xffff) -> tuple[int, list[int], list[int]]:
	if len(data) == 0:
		raise RuntimeError('Cannot split an empty table')
	if len(shiftTests) == 0:
		raise RuntimeError('At least one shift must be tested')
	if max(data) > maxEntry:
		raise RuntimeError(f'Value [{max(data)}] does not fit into an index entry')
	best: tuple[int, list[int], list[int]]|None = None

	# try all shifts and keep the one with the smallest number of entries (both index-arrays use the same entry size)
	for shift in shiftTests:
		index1, index2 = _TrySplit(data, shift)
		if (len(index2) >> shift) - 1 > maxEntry:
			continue
		if best is None or len(index1) + len(index2) < len(best[1]) + len(best[2]):
			best = (shift, index1, index2)
	if best is None:
		raise RuntimeError('No shift produces a block count fitting into an index entry')
	return best
