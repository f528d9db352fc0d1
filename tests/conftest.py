"""
Shared fixtures: small multimodal networks.

Coordinates sit on the equator, where 0.01 degrees of longitude is about
1.11 km, so distances between fixture stations are easy to reason about.
"""

import pytest

from transit_resilience.core.models import NodeRecord, EdgeRecord, ODPair
from transit_resilience.simulation.graph_builder import build_graph


def metro(node_id, lon, name="", region="", type="station", lat=0.0):
    return NodeRecord(node_id, lat, lon, "metro", name=name, region=region, type=type)


def bus(node_id, lon, name="", region="", type="", lat=0.0):
    return NodeRecord(node_id, lat, lon, "bus", name=name, region=region, type=type)


def mmts(node_id, lon, name="", region="", type="station", lat=0.0):
    return NodeRecord(node_id, lat, lon, "mmts", name=name, region=region, type=type)


def link(u, v, mode, time, cost=0.0, distance=1.0, tag="intra", layer=None):
    return EdgeRecord(
        from_id=u,
        to_id=v,
        layer=layer or mode,
        mode=mode,
        edge_type=mode,
        distance_km=distance,
        time_min=time,
        cost_rs=cost,
        intra_or_inter=tag,
    )


@pytest.fixture
def city_nodes():
    """Metro line M1-M2-M3, a parallel bus corridor B1-B2 and one MMTS station."""
    return [
        metro("M1", 0.00, name="Metro One", region="North"),
        metro("M2", 0.01, name="Metro Two", region="North"),
        metro("M3", 0.02, name="Metro Three", region="South"),
        bus("B1", 0.00, name="Bus One", region="North", type="hub", lat=0.005),
        bus("B2", 0.02, name="Bus Two", region="South", type="hub", lat=0.005),
        mmts("R1", 0.01, name="Rail One", region="Central", lat=0.01),
    ]


@pytest.fixture
def city_edges():
    return [
        link("M1", "M2", "metro", 2.0, distance=1.1),
        link("M2", "M3", "metro", 2.0, distance=1.1),
        link("B1", "B2", "bus", 10.0, cost=15.0, distance=2.2),
        link("M1", "B1", "walking", 5.0, distance=0.5, tag="inter"),
        link("M3", "B2", "walking", 5.0, distance=0.5, tag="inter"),
        link("M2", "R1", "walking", 12.0, distance=1.1, tag="inter"),
    ]


@pytest.fixture
def city_graph(city_nodes, city_edges):
    return build_graph(city_nodes, city_edges, "time")


@pytest.fixture
def city_od_pairs():
    return [
        ODPair("M1", "M3", "Metro One", "Metro Three"),
        ODPair("B1", "B2", "Bus One", "Bus Two"),
        ODPair("M1", "R1", "Metro One", "Rail One"),
    ]


@pytest.fixture
def write_dataset(tmp_path):
    """Write node/edge records to CSV files and return their paths."""
    def _write(nodes, edges):
        nodes_csv = tmp_path / "nodes.csv"
        edges_csv = tmp_path / "edges.csv"
        node_lines = ["node_id,lat,lon,layer,name,region,type"]
        for n in nodes:
            node_lines.append(f"{n.node_id},{n.lat},{n.lon},{n.layer},{n.name},{n.region},{n.type}")
        edge_lines = ["from_id,to_id,layer,mode,edge_type,distance_km,time_min,cost_rs,intra_or_inter"]
        for e in edges:
            edge_lines.append(
                f"{e.from_id},{e.to_id},{e.layer},{e.mode},{e.edge_type},"
                f"{e.distance_km},{e.time_min},{e.cost_rs},{e.intra_or_inter}"
            )
        nodes_csv.write_text("\n".join(node_lines) + "\n", encoding="utf-8")
        edges_csv.write_text("\n".join(edge_lines) + "\n", encoding="utf-8")
        return str(nodes_csv), str(edges_csv)
    return _write
