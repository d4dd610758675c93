# routes.py
# ---------------------------------------------------------------------
# Scheduled block times in hours, keyed by ordered (origin, destination).
# Asymmetric: westbound legs fly into the jet stream.

ROUTE_DURATIONS: dict[tuple[str, str], float] = {
    # US domestic
    ("LAX", "JFK"): 5.5,
    ("JFK", "LAX"): 6.0,
    ("LAX", "ORD"): 4.0,
    ("ORD", "LAX"): 4.5,
    ("JFK", "MIA"): 3.0,
    ("MIA", "JFK"): 3.0,
    ("SFO", "BOS"): 5.5,
    ("BOS", "SFO"): 6.0,
    ("DFW", "SEA"): 4.0,
    ("SEA", "DFW"): 3.5,
    ("ATL", "LAX"): 4.75,
    ("LAX", "ATL"): 4.25,
    ("SFO", "JFK"): 5.5,
    ("JFK", "SFO"): 6.25,
    # Transatlantic / transpacific
    ("JFK", "LHR"): 7.0,
    ("LHR", "JFK"): 8.0,
    ("LAX", "NRT"): 11.5,
    ("NRT", "LAX"): 10.0,
    ("DFW", "CDG"): 9.5,
    ("CDG", "DFW"): 10.5,
    ("MIA", "GRU"): 8.5,
    ("GRU", "MIA"): 8.0,
    ("ORD", "FRA"): 8.5,
    ("FRA", "ORD"): 9.5,
    # Intra-Europe
    ("LHR", "CDG"): 1.25,
    ("CDG", "LHR"): 1.25,
    ("DUB", "BCN"): 2.5,
    ("BCN", "DUB"): 2.5,
    ("FRA", "MAD"): 2.5,
    ("MAD", "FRA"): 2.5,
    ("AMS", "FCO"): 2.25,
    ("FCO", "AMS"): 2.25,
}

# (upper bound in statute miles, block hours, label); last bucket is open-ended
DURATION_BUCKETS: tuple[tuple[float, float, str], ...] = (
    (500.0, 1.5, "SHORT"),
    (1500.0, 3.0, "MEDIUM"),
    (3000.0, 6.0, "LONG"),
    (float("inf"), 12.0, "ULTRA"),
)

# When neither the route nor both airports are known
DEFAULT_DURATION_HOURS = 2.5
