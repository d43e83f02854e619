# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024 Bjoern Boss Henrichsen
import struct

import pytest

from unictype import database
from unictype.database import TypeDatabase, EncodeDatabase, DecodeDatabase, LoadDatabase, SaveDatabase, defaultDatabase, HeaderFormat, HeaderSize, CaseBufferSize, DatabaseEnvVar
from unictype.errors import MalformedDatabase, TypeDBError
from unictype.records import TypeRecord, DefaultRecord, PackExtendedRef, ExtendedCaseMask, DecimalMask, DigitMask, LowerMask

from conftest import MakeDatabase

def _sharpS() -> TypeRecord:
	return TypeRecord(PackExtendedRef(0, 2), PackExtendedRef(2, 1), PackExtendedRef(3, 2), 0, 0, ExtendedCaseMask | LowerMask)

def _valid() -> TypeDatabase:
	return MakeDatabase({0xdf: 1, 0x37: 2}, [DefaultRecord, _sharpS(), TypeRecord(0, 0, 0, 7, 7, DecimalMask | DigitMask)], [0x53, 0x53, 0xdf, 0x53, 0x73], maxExpansion=2, version='15.1.0')

def test_round_trip():
	db = _valid()
	decoded = DecodeDatabase(EncodeDatabase(db))
	assert decoded.index.shift == db.index.shift
	assert decoded.index.index1 == db.index.index1
	assert decoded.index.index2 == db.index.index2
	assert decoded.records == db.records
	assert decoded.extended.values == db.extended.values
	assert decoded.unicodeVersion == '15.1.0'
	assert decoded.maxExpansion == 2
	assert decoded.lookup(0xdf) == 1
	assert decoded.record(0x37).decimal == 7

def test_tables_are_immutable():
	decoded = DecodeDatabase(EncodeDatabase(_valid()))
	for table in (decoded.index.index1, decoded.index.index2, decoded.records, decoded.extended.values):
		assert isinstance(table, tuple)

def test_out_of_range_resolves_default_record():
	decoded = DecodeDatabase(EncodeDatabase(_valid()))
	for code in (0x110000, 0x200000, 0xffffffff, -1):
		assert decoded.lookup(code) == 0
		assert decoded.record(code) == DefaultRecord

def test_save_and_load(tmp_path):
	path = str(tmp_path / 'types.bin')
	SaveDatabase(_valid(), path)
	assert LoadDatabase(path).records == _valid().records

def _corrupt(blob: bytes, **fields) -> bytes:
	names = ['magic', 'version', 'shift', 'maxExpansion', 'count1', 'count2', 'recordCount', 'extendedCount', 'unicodeVersion']
	header = dict(zip(names, struct.unpack_from(HeaderFormat, blob, 0)))
	header.update(fields)
	return struct.pack(HeaderFormat, *[header[n] for n in names]) + blob[HeaderSize:]

def test_reject_bad_header():
	blob = EncodeDatabase(_valid())
	with pytest.raises(MalformedDatabase):
		DecodeDatabase(blob[:HeaderSize - 1])
	with pytest.raises(MalformedDatabase):
		DecodeDatabase(_corrupt(blob, magic=b'XXXX'))
	with pytest.raises(MalformedDatabase):
		DecodeDatabase(_corrupt(blob, version=2))

def test_reject_size_mismatch():
	blob = EncodeDatabase(_valid())
	with pytest.raises(MalformedDatabase):
		DecodeDatabase(blob + b'\0')
	with pytest.raises(MalformedDatabase):
		DecodeDatabase(blob[:-1])

def test_reject_expansion_beyond_buffer():
	blob = EncodeDatabase(_valid())
	with pytest.raises(MalformedDatabase):
		DecodeDatabase(_corrupt(blob, maxExpansion=CaseBufferSize + 1))
	with pytest.raises(MalformedDatabase):
		DecodeDatabase(_corrupt(blob, maxExpansion=0))

def test_reject_non_default_record_zero():
	db = MakeDatabase({}, [TypeRecord(1, 0, 0, 0, 0, 0)])
	with pytest.raises(MalformedDatabase):
		DecodeDatabase(EncodeDatabase(db))

def test_reject_dangling_record_index():
	db = MakeDatabase({0x41: 2}, [DefaultRecord, DefaultRecord])
	with pytest.raises(MalformedDatabase):
		DecodeDatabase(EncodeDatabase(db))

def test_reject_extended_out_of_bounds():
	record = TypeRecord(PackExtendedRef(4, 2), PackExtendedRef(0, 1), PackExtendedRef(0, 1), 0, 0, ExtendedCaseMask)
	db = MakeDatabase({0xdf: 1}, [DefaultRecord, record], [0x53, 0x53, 0x53, 0x53, 0x53])
	with pytest.raises(MalformedDatabase):
		DecodeDatabase(EncodeDatabase(db))

def test_reject_extended_longer_than_maximum():
	record = TypeRecord(PackExtendedRef(0, 3), PackExtendedRef(0, 1), PackExtendedRef(0, 1), 0, 0, ExtendedCaseMask)
	db = MakeDatabase({0xdf: 1}, [DefaultRecord, record], [0x46, 0x46, 0x49], maxExpansion=2)
	with pytest.raises(MalformedDatabase):
		DecodeDatabase(EncodeDatabase(db))

def test_reject_invalid_digit_values():
	db = MakeDatabase({0x30: 1}, [DefaultRecord, TypeRecord(0, 0, 0, 10, 0, DecimalMask)])
	with pytest.raises(MalformedDatabase):
		DecodeDatabase(EncodeDatabase(db))

	# values without their flag are not interpreted
	db = MakeDatabase({0x30: 1}, [DefaultRecord, TypeRecord(0, 0, 0, 10, 0, 0)])
	assert DecodeDatabase(EncodeDatabase(db)).record(0x30).decimal == 10

def test_reject_unknown_flags():
	db = MakeDatabase({0x30: 1}, [DefaultRecord, TypeRecord(0, 0, 0, 0, 0, 0x8000)])
	with pytest.raises(MalformedDatabase):
		DecodeDatabase(EncodeDatabase(db))

def test_malformed_database_is_a_typedb_error():
	assert issubclass(MalformedDatabase, TypeDBError)
	assert issubclass(TypeDBError, RuntimeError)

def test_default_database_from_environment(tmp_path, monkeypatch):
	path = str(tmp_path / 'types.bin')
	SaveDatabase(_valid(), path)
	monkeypatch.setattr(database, '_default', None)
	monkeypatch.setenv(DatabaseEnvVar, path)

	db = defaultDatabase()
	assert db.unicodeVersion == '15.1.0'
	assert defaultDatabase() is db

def test_default_database_is_host_built(hostdb):
	import unicodedata
	assert hostdb is defaultDatabase()
	assert hostdb.unicodeVersion == unicodedata.unidata_version
	assert hostdb.records[0] == DefaultRecord
	assert len(hostdb.records) < 0x10000
