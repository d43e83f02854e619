# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024 Bjoern Boss Henrichsen
import logging
import os
import struct
import threading

from .errors import MalformedDatabase
from .records import TypeRecord, DefaultRecord, ExtendedCaseTable, UnpackExtendedRef, ExtendedCaseMask, DecimalMask, DigitMask, AllFlagsMask, ExtendedOffsetMask, ExtendedLengthMask, ExtendedLengthShift
from .trie import CodePointIndex, CodePointLimit, MaxCodePoint

logger = logging.getLogger(__name__)

# binary asset layout (all little-endian):
#	header: magic, format-version, shift, max-expansion, len(index1), len(index2), len(records), len(extended), unicode-version
#	index1: uint16[], index2: uint16[], records: (int32 upper, int32 lower, int32 title, uint8 decimal, uint8 digit, uint16 flags)[], extended: uint32[]
Magic = b'UCTD'
FormatVersion = 1
HeaderFormat = '<4sHBBIIII16s'
HeaderSize = struct.calcsize(HeaderFormat)
RecordFormat = '<iiiBBH'
RecordSize = struct.calcsize(RecordFormat)

# largest expansion of a full case mapping a caller-provided buffer must be able to hold
CaseBufferSize = 4

# environment variable naming a pre-baked asset to be used as default database
DatabaseEnvVar = 'UNICTYPE_DATABASE'

class TypeDatabase:
	def __init__(self, index: CodePointIndex, records: tuple[TypeRecord, ...], extended: ExtendedCaseTable, unicodeVersion: str, maxExpansion: int) -> None:
		self._index = index
		self._records = records
		self._extended = extended
		self._unicodeVersion = unicodeVersion
		self._maxExpansion = maxExpansion

	@property
	def index(self) -> CodePointIndex:
		return self._index
	@property
	def records(self) -> tuple[TypeRecord, ...]:
		return self._records
	@property
	def extended(self) -> ExtendedCaseTable:
		return self._extended
	@property
	def unicodeVersion(self) -> str:
		return self._unicodeVersion
	@property
	def maxExpansion(self) -> int:
		return self._maxExpansion

	def lookup(self, code: int) -> int:
		return self._index.lookup(code)
	def record(self, code: int) -> TypeRecord:
		return self._records[self._index.lookup(code)]

def EncodeDatabase(db: TypeDatabase) -> bytes:
	index1, index2, records, extended = db.index.index1, db.index.index2, db.records, db.extended.values
	version = db.unicodeVersion.encode('ascii')
	if len(version) > 16:
		raise RuntimeError(f'Unicode version [{db.unicodeVersion}] is too long to be stored')

	# write the header followed by the four tables
	out = [struct.pack(HeaderFormat, Magic, FormatVersion, db.index.shift, db.maxExpansion, len(index1), len(index2), len(records), len(extended), version)]
	out.append(struct.pack(f'<{len(index1)}H', *index1))
	out.append(struct.pack(f'<{len(index2)}H', *index2))
	out += [struct.pack(RecordFormat, *r) for r in records]
	out.append(struct.pack(f'<{len(extended)}I', *extended))
	return b''.join(out)

def _ValidateRecord(index: int, record: TypeRecord, extendedSize: int, maxExpansion: int) -> None:
	if (record.flags & ~AllFlagsMask) != 0:
		raise MalformedDatabase(f'Record [{index}] carries unknown flags [{record.flags:#06x}]')
	if (record.flags & DecimalMask) and record.decimal > 9:
		raise MalformedDatabase(f'Record [{index}] has an invalid decimal value [{record.decimal}]')
	if (record.flags & DigitMask) and record.digit > 9:
		raise MalformedDatabase(f'Record [{index}] has an invalid digit value [{record.digit}]')
	if (record.flags & ExtendedCaseMask) == 0:
		return

	# every packed reference must point to a non-empty region within the extended case table
	for field in (record.upper, record.lower, record.title):
		if field < 0 or (field & ~(ExtendedOffsetMask | (ExtendedLengthMask << ExtendedLengthShift))) != 0:
			raise MalformedDatabase(f'Record [{index}] has a malformed extended case reference [{field:#x}]')
		offset, length = UnpackExtendedRef(field)
		if length < 1 or length > maxExpansion or offset + length > extendedSize:
			raise MalformedDatabase(f'Record [{index}] references [{offset}:{offset + length}] outside of the extended case table')

def ValidateTables(shift: int, index1: tuple[int, ...], index2: tuple[int, ...], records: tuple[TypeRecord, ...], extended: tuple[int, ...], maxExpansion: int) -> None:
	if shift > 16:
		raise MalformedDatabase(f'Unsupported index shift [{shift}]')
	if len(index1) != (CodePointLimit >> shift):
		raise MalformedDatabase(f'Index1 must cover the code point space [{len(index1)} != {CodePointLimit >> shift}]')
	if len(index2) == 0 or (len(index2) % (1 << shift)) != 0:
		raise MalformedDatabase(f'Index2 is not made up of full blocks [{len(index2)}]')
	if max(index1) >= (len(index2) >> shift):
		raise MalformedDatabase('Index1 references a block beyond index2')
	if len(records) == 0 or max(index2) >= len(records):
		raise MalformedDatabase('Index2 references a record beyond the record table')
	if records[0] != DefaultRecord:
		raise MalformedDatabase('Record 0 must be the default record')
	if maxExpansion < 1 or maxExpansion > CaseBufferSize:
		raise MalformedDatabase(f'Maximum case expansion [{maxExpansion}] exceeds the case buffer size [{CaseBufferSize}]')
	if len(extended) > 0 and max(extended) > MaxCodePoint:
		raise MalformedDatabase('Extended case table contains values beyond the code point space')
	for i in range(len(records)):
		_ValidateRecord(i, records[i], len(extended), maxExpansion)

def DecodeDatabase(blob: bytes) -> TypeDatabase:
	if len(blob) < HeaderSize:
		raise MalformedDatabase(f'Asset of size [{len(blob)}] is too small to contain a header')
	magic, version, shift, maxExpansion, count1, count2, recordCount, extendedCount, unicodeVersion = struct.unpack_from(HeaderFormat, blob, 0)
	if magic != Magic:
		raise MalformedDatabase(f'Invalid magic [{magic!r}] encountered')
	if version != FormatVersion:
		raise MalformedDatabase(f'Unsupported format version [{version}]')

	# check that the blob is exactly made up of the announced tables
	expected = HeaderSize + 2 * count1 + 2 * count2 + RecordSize * recordCount + 4 * extendedCount
	if len(blob) != expected:
		raise MalformedDatabase(f'Asset size [{len(blob)}] does not match the announced size [{expected}]')

	# unpack all tables into immutable sequences
	offset = HeaderSize
	index1 = struct.unpack_from(f'<{count1}H', blob, offset)
	offset += 2 * count1
	index2 = struct.unpack_from(f'<{count2}H', blob, offset)
	offset += 2 * count2
	records = tuple(TypeRecord._make(r) for r in struct.iter_unpack(RecordFormat, blob[offset:offset + RecordSize * recordCount]))
	offset += RecordSize * recordCount
	extended = struct.unpack_from(f'<{extendedCount}I', blob, offset)

	ValidateTables(shift, index1, index2, records, extended, maxExpansion)
	try:
		unicodeVersion = unicodeVersion.rstrip(b'\0').decode('ascii')
	except UnicodeDecodeError as e:
		raise MalformedDatabase('Unicode version is not plain ascii') from e
	return TypeDatabase(CodePointIndex(shift, index1, index2), records, ExtendedCaseTable(extended), unicodeVersion, maxExpansion)

def LoadDatabase(path: str) -> TypeDatabase:
	logger.debug('Loading type database from [%s]', path)
	with open(path, 'rb') as file:
		return DecodeDatabase(file.read())

def SaveDatabase(db: TypeDatabase, path: str) -> None:
	with open(path, 'wb') as file:
		file.write(EncodeDatabase(db))

def _LoadDefault() -> TypeDatabase:
	path = os.environ.get(DatabaseEnvVar, '')
	if path != '':
		return LoadDatabase(path)

	# bake the asset from the unicode database of the running interpreter
	from .generator import BuildDatabase, HostSource
	logger.debug('Baking type database from the host unicode database')
	return DecodeDatabase(EncodeDatabase(BuildDatabase(HostSource())))

_defaultLock = threading.Lock()
_default: TypeDatabase|None = None

def defaultDatabase() -> TypeDatabase:
	global _default
	if _default is None:
		with _defaultLock:
			if _default is None:
				_default = _LoadDefault()
	return _default
