"""Constants for the czynaczas.pl API adapter.

The timetable endpoint returns upcoming departures for one stop as a JSON
list. Times are seconds since midnight of the service day.
"""

DEFAULT_BASE_URL = "https://czynaczas.pl/api/warsaw"
TIMETABLE_PATH = "timetable"  # GET {base}/timetable/{stop_id}?limit=N
TRIP_PATH = "trip"  # GET {base}/trip/{trip_id}

DEFAULT_HEADERS = {
    "Accept": "application/json",
}

# vehicle_type_id -> transport mode
VEHICLE_TYPE_MODES = {
    2: "TRAIN",  # WKD commuter rail
    3: "BUS",  # ZTM bus
}

# Line labels that identify a train when no vehicle type code is present
TRAIN_LINE_LABELS = frozenset({"WKD", "A1"})

MODE_AGENCIES = {
    "TRAIN": "WKD",
    "BUS": "ZTM",
}
