# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024 Bjoern Boss Henrichsen
import os

import pytest

from unictype.database import TypeDatabase, defaultDatabase
from unictype.generator import BuildDatabase, CharProperties, GeneratorConfig, UCDSource
from unictype.records import TypeRecord, ExtendedCaseTable, ExtendedCaseMask, AlphaMask, UpperMask, LowerMask, CasedMask
from unictype.trie import CodePointIndex, CodePointLimit, SplitBins

# in-memory source producing a handful of code points
class ListSource:
	def __init__(self, props: list[CharProperties], version: str = 'test') -> None:
		self._props = props
		self.version = version

	def __str__(self) -> str:
		return 'list source'

	def properties(self):
		return iter(self._props)

def Cased(code: int, upper: int, lower: int, flags: int) -> CharProperties:
	return CharProperties(code, flags | CasedMask | AlphaMask, 0, 0, (upper,), (lower,), (upper,))

# assemble a database directly from its tables (no validation involved)
def MakeDatabase(assign: dict[int, int], records: list[TypeRecord], extended: list[int] = [], shift: int = 8, maxExpansion: int = 3, version: str = 'test') -> TypeDatabase:
	data = [0] * CodePointLimit
	for code in assign:
		data[code] = assign[code]
	shift, index1, index2 = SplitBins(data, [shift])
	return TypeDatabase(CodePointIndex(shift, tuple(index1), tuple(index2)), tuple(records), ExtendedCaseTable(tuple(extended)), version, maxExpansion)

@pytest.fixture(scope='session')
def hostdb() -> TypeDatabase:
	return defaultDatabase()

@pytest.fixture(scope='session')
def tinydb() -> TypeDatabase:
	props = [
		Cased(0x41, 0x41, 0x61, UpperMask),
		Cased(0x42, 0x42, 0x62, UpperMask),
		Cased(0x61, 0x41, 0x61, LowerMask),
		CharProperties(0xdf, ExtendedCaseMask | CasedMask | LowerMask | AlphaMask, 0, 0, (0x53, 0x53), (0xdf,), (0x53, 0x73)),
		CharProperties(0xfb03, ExtendedCaseMask | CasedMask | LowerMask | AlphaMask, 0, 0, (0x46, 0x46, 0x49), (0xfb03,), (0x46, 0x66, 0x69))
	]
	return BuildDatabase(ListSource(props), GeneratorConfig([4, 8]))

UnicodeDataLines = [
	'0020;SPACE;Zs;0;WS;;;;;N;;;;;',
	'0041;LATIN CAPITAL LETTER A;Lu;0;L;;;;;N;;;;0061;',
	'0061;LATIN SMALL LETTER A;Ll;0;L;;;;;N;;;0041;;0041',
	'00DF;LATIN SMALL LETTER SHARP S;Ll;0;L;;;;;N;;;;;',
	'01C5;LATIN CAPITAL LETTER D WITH SMALL LETTER Z WITH CARON;Lt;0;L;<compat> 0044 017E;;;;N;LATIN LETTER CAPITAL D SMALL Z HACEK;;01C4;01C6;01C5',
	'0660;ARABIC-INDIC DIGIT ZERO;Nd;0;AN;;0;0;0;N;;;;;',
	'2028;LINE SEPARATOR;Zl;0;WS;;;;;N;;;;;',
	'4E00;<CJK Ideograph, First>;Lo;0;L;;;;;N;;;;;',
	'9FFF;<CJK Ideograph, Last>;Lo;0;L;;;;;N;;;;;'
]

DerivedCorePropertiesLines = [
	'# DerivedCoreProperties.txt',
	'# @missing: 0000..10FFFF; InCB; None',
	'0061          ; Lowercase # Ll       LATIN SMALL LETTER A',
	'00DF          ; Lowercase # Ll       LATIN SMALL LETTER SHARP S',
	'0041          ; Uppercase # Lu       LATIN CAPITAL LETTER A',
	'0041          ; Cased',
	'0061          ; Cased',
	'00DF          ; Cased',
	'01C5          ; Cased',
	'0027          ; Case_Ignorable # Po       APOSTROPHE',
	'0041          ; XID_Start',
	'0061          ; XID_Start',
	'00DF          ; XID_Start',
	'01C5          ; XID_Start',
	'4E00..9FFF    ; XID_Start',
	'0041          ; XID_Continue',
	'0061          ; XID_Continue',
	'0660          ; XID_Continue',
	'094D          ; InCB; Linker'
]

SpecialCasingLines = [
	'# SpecialCasing.txt',
	'00DF; 00DF; 0053 0073; 0053 0053; # LATIN SMALL LETTER SHARP S',
	'',
	'03A3; 03C2; 03A3; 03A3; Final_Sigma; # GREEK CAPITAL LETTER SIGMA'
]

def WriteLines(path, lines: list[str]) -> None:
	os.makedirs(os.path.dirname(path), exist_ok=True)
	with open(path, 'w', encoding='utf-8') as file:
		file.write('\n'.join(lines) + '\n')

@pytest.fixture
def ucddir(tmp_path) -> str:
	WriteLines(tmp_path / 'ReadMe.txt', ['# This directory contains the final data files', '# for Version 16.0.0 of the Unicode Standard.'])
	WriteLines(tmp_path / 'UnicodeData.txt', UnicodeDataLines)
	WriteLines(tmp_path / 'DerivedCoreProperties.txt', DerivedCorePropertiesLines)
	WriteLines(tmp_path / 'SpecialCasing.txt', SpecialCasingLines)
	return str(tmp_path)

@pytest.fixture
def ucddb(ucddir) -> TypeDatabase:
	return BuildDatabase(UCDSource(ucddir), GeneratorConfig([8]))
