# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024 Bjoern Boss Henrichsen
from collections import namedtuple

# flag bits of a type record (shared with the binary asset, must never be renumbered)
AlphaMask = 0x01
DecimalMask = 0x02
DigitMask = 0x04
LowerMask = 0x08
LinebreakMask = 0x10
SpaceMask = 0x20
TitleMask = 0x40
UpperMask = 0x80
XidStartMask = 0x100
XidContinueMask = 0x200
PrintableMask = 0x400
NumericMask = 0x800
CaseIgnorableMask = 0x1000
CasedMask = 0x2000
ExtendedCaseMask = 0x4000
AllFlagsMask = 0x7fff

FlagNames: dict[int, str] = {
	AlphaMask: 'Alpha',
	DecimalMask: 'Decimal',
	DigitMask: 'Digit',
	LowerMask: 'Lower',
	LinebreakMask: 'Linebreak',
	SpaceMask: 'Space',
	TitleMask: 'Title',
	UpperMask: 'Upper',
	XidStartMask: 'XidStart',
	XidContinueMask: 'XidContinue',
	PrintableMask: 'Printable',
	NumericMask: 'Numeric',
	CaseIgnorableMask: 'CaseIgnorable',
	CasedMask: 'Cased',
	ExtendedCaseMask: 'ExtendedCase'
}

# packed reference into the extended case table: [offset: bits 0-15][length: bits 24+]
ExtendedOffsetMask = 0xffff
ExtendedLengthShift = 24
ExtendedLengthMask = 0x7f

# decimal/digit value stored for records without the corresponding flag
NoValue = 0

class TypeRecord(namedtuple('TypeRecord', 'upper lower title decimal digit flags')):
	__slots__ = ()

	def has(self, mask: int) -> bool:
		return (self.flags & mask) != 0
	def extended(self) -> bool:
		return (self.flags & ExtendedCaseMask) != 0
	def flagNames(self) -> list[str]:
		return [FlagNames[m] for m in FlagNames if (self.flags & m) != 0]

DefaultRecord = TypeRecord(0, 0, 0, NoValue, NoValue, 0)

def PackExtendedRef(offset: int, length: int) -> int:
	if offset < 0 or offset > ExtendedOffsetMask:
		raise RuntimeError(f'Extended case offset [{offset}] does not fit into the reference')
	if length < 1 or length > ExtendedLengthMask:
		raise RuntimeError(f'Extended case length [{length}] does not fit into the reference')
	return offset | (length << ExtendedLengthShift)

def UnpackExtendedRef(field: int) -> tuple[int, int]:
	return (field & ExtendedOffsetMask, (field >> ExtendedLengthShift) & ExtendedLengthMask)

# flat sequence of code points, regions of which are referenced by the packed case fields of extended records
class ExtendedCaseTable:
	def __init__(self, values: tuple[int, ...]) -> None:
		self._values = values

	def __len__(self) -> int:
		return len(self._values)
	@property
	def values(self) -> tuple[int, ...]:
		return self._values

	def first(self, field: int) -> int:
		return self._values[field & ExtendedOffsetMask]
	def sequence(self, field: int) -> tuple[int, ...]:
		offset, length = UnpackExtendedRef(field)
		return self._values[offset:offset + length]
	def copy(self, field: int, res) -> int:
		offset, length = UnpackExtendedRef(field)
		for i in range(length):
			res[i] = self._values[offset + i]
		return length
