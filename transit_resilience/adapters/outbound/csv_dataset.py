"""
CSV Dataset Adapter

Reads the node and edge tables of a transport network into records.

    nodes.csv: node_id, lat, lon, layer [, name, region, type]
    edges.csv: from_id, to_id [, layer, mode, edge_type, distance_km,
               time_min, cost_rs, intra_or_inter]
"""

import logging
from typing import List, Tuple

import pandas as pd

from transit_resilience.core.models import NodeRecord, EdgeRecord

logger = logging.getLogger(__name__)

NODE_REQUIRED = ["node_id", "lat", "lon", "layer"]
NODE_OPTIONAL = ["name", "region", "type"]
EDGE_REQUIRED = ["from_id", "to_id"]
EDGE_TEXT = ["layer", "mode", "edge_type", "intra_or_inter"]
EDGE_NUMERIC = ["distance_km", "time_min", "cost_rs"]


def _check_columns(df: pd.DataFrame, required: List[str], path: str) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{path}: missing required column(s) {', '.join(missing)}")


def load_nodes(path: str) -> List[NodeRecord]:
    df = pd.read_csv(path, dtype={"node_id": str}, skipinitialspace=True)
    df.columns = [c.strip() for c in df.columns]
    _check_columns(df, NODE_REQUIRED, path)

    for col in NODE_OPTIONAL:
        if col not in df.columns:
            df[col] = ""
    df[NODE_OPTIONAL + ["layer"]] = df[NODE_OPTIONAL + ["layer"]].fillna("").astype(str)
    df["lat"] = pd.to_numeric(df["lat"], errors="coerce")
    df["lon"] = pd.to_numeric(df["lon"], errors="coerce")

    bad = df["lat"].isna() | df["lon"].isna() | df["node_id"].isna()
    if bad.any():
        logger.warning(f"{path}: dropping {int(bad.sum())} node row(s) without id or coordinates")
        df = df[~bad]

    return [
        NodeRecord(
            node_id=str(row.node_id).strip(),
            lat=float(row.lat),
            lon=float(row.lon),
            layer=row.layer.strip(),
            name=row.name.strip(),
            region=row.region.strip(),
            type=row.type.strip(),
        )
        for row in df.itertuples(index=False)
    ]


def load_edges(path: str) -> List[EdgeRecord]:
    df = pd.read_csv(path, dtype={"from_id": str, "to_id": str}, skipinitialspace=True)
    df.columns = [c.strip() for c in df.columns]
    _check_columns(df, EDGE_REQUIRED, path)

    for col in EDGE_TEXT:
        if col not in df.columns:
            df[col] = ""
    for col in EDGE_NUMERIC:
        if col not in df.columns:
            df[col] = 0.0
    df[EDGE_TEXT] = df[EDGE_TEXT].fillna("").astype(str)
    for col in EDGE_NUMERIC:
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0.0)

    df = df.dropna(subset=EDGE_REQUIRED)
    return [
        EdgeRecord(
            from_id=str(row.from_id).strip(),
            to_id=str(row.to_id).strip(),
            layer=row.layer.strip(),
            mode=row.mode.strip(),
            edge_type=row.edge_type.strip(),
            distance_km=float(row.distance_km),
            time_min=float(row.time_min),
            cost_rs=float(row.cost_rs),
            intra_or_inter=row.intra_or_inter.strip(),
        )
        for row in df.itertuples(index=False)
    ]


def load_dataset(nodes_path: str, edges_path: str) -> Tuple[List[NodeRecord], List[EdgeRecord]]:
    """Read both tables; raises FileNotFoundError or ValueError."""
    nodes = load_nodes(nodes_path)
    edges = load_edges(edges_path)
    logger.info(f"Loaded {len(nodes)} nodes from {nodes_path}, {len(edges)} edges from {edges_path}")
    return nodes, edges
