'''
   Copyright (c) 2017 Yogesh Khatri

   This file is part of mac_apt (macOS Artifact Parsing Tool).
   Usage or distribution of this software/code is subject to the
   terms of the MIT License.

   dsstore - reader for macOS Finder .DS_Store files
'''

__version__ = "1.0"

from dsstore.allocator import Allocator, DecodeAddress
from dsstore.decoder import ReadMacTimestamp, ReadRecord, Record
from dsstore.errors import *
from dsstore.store import DsStore
from dsstore.tree import Directory, Traverse
from dsstore.values import Background, BackgroundType, RecordValue, ValueKind, ViewStyle
