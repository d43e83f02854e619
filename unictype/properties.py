# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024 Bjoern Boss Henrichsen
from .database import TypeDatabase, defaultDatabase
from .records import TypeRecord, AlphaMask, DecimalMask, DigitMask, LowerMask, LinebreakMask, SpaceMask, TitleMask, UpperMask, XidStartMask, XidContinueMask, PrintableMask, NumericMask, CaseIgnorableMask, CasedMask

# every query resolves the record of the code point and tests or extracts a single field of it
#	=> code points outside of [0, 0x10ffff] resolve to the default record (no flags set)

def getTypeRecord(ch: int, db: TypeDatabase|None = None) -> TypeRecord:
	return (defaultDatabase() if db is None else db).record(ch)

def _test(ch: int, mask: int, db: TypeDatabase|None) -> bool:
	return (getTypeRecord(ch, db).flags & mask) != 0

# general category Ll, Lu, Lt, Lm or Lo
def isAlpha(ch: int, db: TypeDatabase|None = None) -> bool:
	return _test(ch, AlphaMask, db)

# derived property Uppercase
def isUppercase(ch: int, db: TypeDatabase|None = None) -> bool:
	return _test(ch, UpperMask, db)

# derived property Lowercase
def isLowercase(ch: int, db: TypeDatabase|None = None) -> bool:
	return _test(ch, LowerMask, db)

# general category Lt
def isTitlecase(ch: int, db: TypeDatabase|None = None) -> bool:
	return _test(ch, TitleMask, db)

def isCased(ch: int, db: TypeDatabase|None = None) -> bool:
	return _test(ch, CasedMask, db)

def isCaseIgnorable(ch: int, db: TypeDatabase|None = None) -> bool:
	return _test(ch, CaseIgnorableMask, db)

def isXidStart(ch: int, db: TypeDatabase|None = None) -> bool:
	return _test(ch, XidStartMask, db)

def isXidContinue(ch: int, db: TypeDatabase|None = None) -> bool:
	return _test(ch, XidContinueMask, db)

# everything but the categories Cc, Cf, Cs, Co, Cn, Zl, Zp and Zs (with the exception of the ascii space)
def isPrintable(ch: int, db: TypeDatabase|None = None) -> bool:
	return _test(ch, PrintableMask, db)

def isNumeric(ch: int, db: TypeDatabase|None = None) -> bool:
	return _test(ch, NumericMask, db)

def isDecimalDigit(ch: int, db: TypeDatabase|None = None) -> bool:
	return _test(ch, DecimalMask, db)

def isDigit(ch: int, db: TypeDatabase|None = None) -> bool:
	return _test(ch, DigitMask, db)

# general category Zs or bidirectional class WS, B or S
def isSpace(ch: int, db: TypeDatabase|None = None) -> bool:
	return _test(ch, SpaceMask, db)

# general category Zl or bidirectional class B
def isLinebreak(ch: int, db: TypeDatabase|None = None) -> bool:
	return _test(ch, LinebreakMask, db)

# decimal value (0-9) or -1 if the code point is not a decimal digit
def toDecimalDigit(ch: int, db: TypeDatabase|None = None) -> int:
	record = getTypeRecord(ch, db)
	return (record.decimal if (record.flags & DecimalMask) else -1)

# digit value (0-9) or -1 if the code point is not a digit
def toDigit(ch: int, db: TypeDatabase|None = None) -> int:
	record = getTypeRecord(ch, db)
	return (record.digit if (record.flags & DigitMask) else -1)
