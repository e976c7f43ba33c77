# pirkit

pirkit handles the bookkeeping around a private information retrieval (PIR) service. It reads the service configuration, writes keyed batch files, groups batches into mega batches, stores batch metadata and records how long each step takes.

## Modules

- **`pirkit.config`** reads a JSON service configuration into dataclasses:
  - `GlobalConfig` holds one section object for each part of the service.
  - The section classes are `LogConfig`, `DataConfig`, `GrpcConfig`, `PsiConfig`, `PirConfig`, `ProxyConfig` with `GatewayConfig`, and `HttpConfig`.
  - `parse_global_config(data)` reads the sections `logConfig`, `dataConfig`, `proxyConfig`, `grpcConfig`, `psiConfig` and `pirConfig`:
    - A section that is absent keeps its defaults.
    - A section that is present must hold all of its fields. Otherwise `KeyError` is raised.
    - A field of the wrong type raises `TypeError`.
    - A port or count outside the unsigned 32-bit range raises `ValueError`.
    - `httpConfig` is not read, so `http_config` always keeps its defaults.
  - `init_global_config(file_path)` loads a JSON file and makes it the process-wide configuration.
  - `get_global_config()` returns the process-wide configuration.
- **`pirkit.operators`** applies the named operators `add`, `mul`, `sublr` (first minus second) and `subrl` (second minus first) to a list of values:
  - Each operator needs at least two inputs. Fewer raise `ValueError`.
  - `create_executor(op)` returns an executor for the operator.
  - `run_execute(op, inputs)` applies the operator in one call.
  - An unknown name raises `UnsupportedOperatorError`.
  - `ExecutorChecker.check_ops(ops)` returns `(True, "")` when every name is supported. Otherwise it returns `(False, "operator <name> not supported")` for the first unsupported name.
- **`pirkit.time_profiler`** records the elapsed time of consecutive phases:
  - Each phase is named and tagged with a `ProType`: `NETWORK`, `LOAD_DB`, `ALGO` or `LOAD_CSV`.
  - `TimeProfiler.count(name, pro_type)` ends the running phase and starts a new one.
  - `flush()` ends the running phase.
  - `report()` summarises each phase.
  - `proto_string()` encodes the total milliseconds per category as JSON bytes.
  - `parse_profile` decodes those bytes.
  - `TimeTrack` holds the durations of one phase.
- **`pirkit.batch_writer.BatchWriter`** writes a CSV file:
  - The file starts with a header row.
  - Rows are written in buffered chunks of `MAX_ITEM_SIZE` (4096) rows.
  - `release()` flushes the buffer and closes the file. The writer can also be used as a context manager.
  - `total_count` is the number of rows flushed so far.
  - `enable_client_filter(server_labels)` keeps only the writer's own label columns. It picks them by name out of the server's label list.
- **`pirkit.mega_batch.MegaBatch`** is a group of hashed batches:
  - `MegaBatch.single(name, size, count)` creates a group that holds one batch.
  - Groups are ordered by `total_size`.
  - `+=` joins two groups.
  - `serialize` and `deserialize` write a group to a binary stream and read it back.
- **`pirkit.db_meta_info`** maps batches to merged batches:
  - `DbMetaInfo.set_batch(names, counts)` builds the mapping. While the smallest batch holds fewer than `PER_BATCH_MIN_SIZE` rows, it merges the two smallest batches. It then maps each batch number to its merged batch.
  - `get_merged_batch(n)` looks up that mapping.
  - `serialize` and `deserialize` write the metadata to a binary file and read it back.
  - `create_meta_info_path` and `create_batch_name` give the file paths for a metadata file and for a merged batch's cache file.
  - `DbBatchHashHelper.serialize_batch_hash(info)` encodes the mapping, the server labels and the batch sizes as JSON bytes for a client.
  - `deserialize_batch_hash` reads those bytes back.

## Example

```python
from pirkit.config import parse_global_config
from pirkit.db_meta_info import DbBatchHashHelper, DbMetaInfo
from pirkit.operators import run_execute

config = parse_global_config({"grpcConfig": {"selfPort": 234, "otherPort": 234}})
assert config.grpc_config.self_port == 234
assert config.proxy_config.gateway_config.port == 12000

info = DbMetaInfo("key", "meta_path", ["id"], ["label"])
info.set_batch(["batch1", "batch2", "batch3"], [100, 200, 300])
assert len(info.mega_batches) == 1
payload = DbBatchHashHelper.serialize_batch_hash(info)

helper = DbBatchHashHelper()
helper.deserialize_batch_hash(payload)
assert helper.get_merged_batch(0) == 0

assert run_execute("subrl", [2, 10]) == 8
```

## What it does not do

pirkit has no cryptography, no network transport and no server or command-line program.

- It does not run PIR queries.
- It does not split a source data set into batch files by itself. You supply the batch names and row counts.
- It does not build or load the encrypted caches of merged batches. It only names the paths where those caches would be kept.

## Installation

```
pip install .
```

## Tests

```
pip install .[test]
pytest
```