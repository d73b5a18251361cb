"""Built-in descriptors for the pool libraries supported out of the box."""
from typing import List

from xa_datasource.datasources.models import AdapterDescriptor, FieldMapping

MILLIS_PER_SECOND = 1000

PSYCOPG_POOL = AdapterDescriptor(
    implementation_identifier="psycopg_pool.ConnectionPool",
    description="psycopg 3 connection pool",
    priority=10,
    field_mappings=[
        FieldMapping(canonical_key="url", vendor_key="conninfo"),
        FieldMapping(canonical_key="min_idle", vendor_key="min_size"),
        FieldMapping(canonical_key="max_pool_size", vendor_key="max_size"),
        FieldMapping(canonical_key="connection_timeout_ms", vendor_key="timeout", divisor=MILLIS_PER_SECOND),
        FieldMapping(canonical_key="username", vendor_key="kwargs.user"),
        FieldMapping(canonical_key="password", vendor_key="kwargs.password"),
    ],
    defaults={"name": "xa-datasource", "open": False},
)

SQLALCHEMY_QUEUE_POOL = AdapterDescriptor(
    implementation_identifier="sqlalchemy.pool.QueuePool",
    description="SQLAlchemy engine with the default QueuePool",
    priority=20,
    field_mappings=[
        FieldMapping(canonical_key="url", vendor_key="url"),
        FieldMapping(canonical_key="max_pool_size", vendor_key="pool_size"),
        FieldMapping(canonical_key="connection_timeout_ms", vendor_key="pool_timeout", divisor=MILLIS_PER_SECOND),
    ],
    defaults={"max_overflow": 0, "pool_pre_ping": True},
)

DBUTILS_POOLED_DB = AdapterDescriptor(
    implementation_identifier="dbutils.pooled_db.PooledDB",
    description="DBUtils PooledDB over any DB-API 2 driver",
    priority=30,
    field_mappings=[
        FieldMapping(canonical_key="driver_class_name", vendor_key="creator"),
        FieldMapping(canonical_key="url", vendor_key="dsn"),
        FieldMapping(canonical_key="username", vendor_key="user"),
        FieldMapping(canonical_key="password", vendor_key="password"),
        FieldMapping(canonical_key="min_idle", vendor_key="mincached"),
        FieldMapping(canonical_key="max_pool_size", vendor_key="maxconnections"),
    ],
    defaults={"blocking": True},
)

ASYNCPG_POOL = AdapterDescriptor(
    implementation_identifier="asyncpg.pool.Pool",
    description="asyncpg connection pool (create_pool keyword arguments)",
    priority=40,
    field_mappings=[
        FieldMapping(canonical_key="url", vendor_key="dsn"),
        FieldMapping(canonical_key="username", vendor_key="user"),
        FieldMapping(canonical_key="password", vendor_key="password"),
        FieldMapping(canonical_key="min_idle", vendor_key="min_size"),
        FieldMapping(canonical_key="max_pool_size", vendor_key="max_size"),
        FieldMapping(canonical_key="connection_timeout_ms", vendor_key="timeout", divisor=MILLIS_PER_SECOND),
    ],
    defaults={"max_inactive_connection_lifetime": 300.0},
)


def builtin_descriptors() -> List[AdapterDescriptor]:
    return [PSYCOPG_POOL, SQLALCHEMY_QUEUE_POOL, DBUTILS_POOLED_DB, ASYNCPG_POOL]
