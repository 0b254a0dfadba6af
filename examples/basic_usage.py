"""
Basic usage example for diskstore.
"""

from diskstore import ByteArray, ByteArrayFactory, DiskDatabase, StoreStatus

# Open store
print("Loading store...")
database = DiskDatabase("data/players/", use_compression=True)
database.load()
print(f"Store at {database.path} holds {database.count} records")

# Insert
value = ByteArray(key=1, data=b"abc")
if database.try_add(value):
    print("Added record 1")
else:
    print("Record 1 already exists")

# Typed results tell conflicts apart from I/O failures
result = database.add(value)
if result.status is StoreStatus.CONFLICT:
    print("Second add rejected: key already stored")

# Read
ok, loaded = database.try_get_value(1, ByteArrayFactory(3, key=1))
if ok:
    print(f"Record 1: {loaded.data!r}")

# Overwrite
database.add_or_update(ByteArray(key=1, data=b"xyz"))

# Remove and hand back the old value
ok, removed = database.try_remove_value(1, ByteArrayFactory(3, key=1))
print(f"Removed: {removed.data!r}" if ok else "Nothing to remove")

database.unload()
