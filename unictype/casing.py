# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024 Bjoern Boss Henrichsen
from .database import TypeDatabase, CaseBufferSize, defaultDatabase
from .errors import BufferTooSmall

# single mappings return the code point shifted by the record's delta, or for extended records, the
# first code point of the full expansion (i.e. 'ß' maps to 'S' in upper case, while the full mapping yields 'SS')

def newCaseBuffer() -> list[int]:
	return [0] * CaseBufferSize

def _db(db: TypeDatabase|None) -> TypeDatabase:
	return (defaultDatabase() if db is None else db)

def _single(ch: int, db: TypeDatabase, extended: bool, field: int) -> int:
	if extended:
		return db.extended.first(field)
	return ch + field

def _full(ch: int, db: TypeDatabase, extended: bool, field: int, res) -> int:
	if extended:
		return db.extended.copy(field, res)
	res[0] = ch + field
	return 1

def _checkBuffer(res) -> None:
	if len(res) < CaseBufferSize:
		raise BufferTooSmall(len(res), CaseBufferSize)

def toUppercase(ch: int, db: TypeDatabase|None = None) -> int:
	db = _db(db)
	record = db.record(ch)
	return _single(ch, db, record.extended(), record.upper)

def toLowercase(ch: int, db: TypeDatabase|None = None) -> int:
	db = _db(db)
	record = db.record(ch)
	return _single(ch, db, record.extended(), record.lower)

def toTitlecase(ch: int, db: TypeDatabase|None = None) -> int:
	db = _db(db)
	record = db.record(ch)
	return _single(ch, db, record.extended(), record.title)

# full mappings write the expansion to res (must hold at least CaseBufferSize values) and return its length
def toUpperFull(ch: int, res, db: TypeDatabase|None = None) -> int:
	_checkBuffer(res)
	db = _db(db)
	record = db.record(ch)
	return _full(ch, db, record.extended(), record.upper, res)

def toLowerFull(ch: int, res, db: TypeDatabase|None = None) -> int:
	_checkBuffer(res)
	db = _db(db)
	record = db.record(ch)
	return _full(ch, db, record.extended(), record.lower, res)

def toTitleFull(ch: int, res, db: TypeDatabase|None = None) -> int:
	_checkBuffer(res)
	db = _db(db)
	record = db.record(ch)
	return _full(ch, db, record.extended(), record.title, res)

def upperFull(ch: int, db: TypeDatabase|None = None) -> tuple[int, ...]:
	res = newCaseBuffer()
	return tuple(res[:toUpperFull(ch, res, db)])

def lowerFull(ch: int, db: TypeDatabase|None = None) -> tuple[int, ...]:
	res = newCaseBuffer()
	return tuple(res[:toLowerFull(ch, res, db)])

def titleFull(ch: int, db: TypeDatabase|None = None) -> tuple[int, ...]:
	res = newCaseBuffer()
	return tuple(res[:toTitleFull(ch, res, db)])
