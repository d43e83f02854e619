# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024 Bjoern Boss Henrichsen
__version__ = '1.0.0'

from .errors import TypeDBError, MalformedDatabase, BufferTooSmall
from .records import TypeRecord
from .database import TypeDatabase, CaseBufferSize, defaultDatabase, LoadDatabase, SaveDatabase, EncodeDatabase, DecodeDatabase
from .properties import getTypeRecord, isAlpha, isUppercase, isLowercase, isTitlecase, isCased, isCaseIgnorable, isXidStart, isXidContinue, isPrintable, isNumeric, isDecimalDigit, isDigit, isSpace, isLinebreak, toDecimalDigit, toDigit
from .casing import newCaseBuffer, toUppercase, toLowercase, toTitlecase, toUpperFull, toLowerFull, toTitleFull, upperFull, lowerFull, titleFull
