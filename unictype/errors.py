# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024 Bjoern Boss Henrichsen
class TypeDBError(RuntimeError):
	pass

# raised while decoding or validating a binary table asset
class MalformedDatabase(TypeDBError):
	pass

# raised when an output buffer cannot hold the longest case expansion
class BufferTooSmall(TypeDBError):
	def __init__(self, size: int, required: int) -> None:
		super().__init__(f'Case buffer of size [{size}] is smaller than the required [{required}]')
		self.size = size
		self.required = required
