# airports.py
# ---------------------------------------------------------------------
# Airport reference rows: IATA -> (city, country, lat, lon, IANA zone).
# Codes that collide with words commonly printed on passes (LOS, MRS, ADD,
# JAN, CAN) are not listed; they still validate as plausible codes.

AIRPORTS: dict[str, tuple[str, str, float, float, str]] = {
    # === US EAST ===
    "JFK": ("New York", "US", 40.6413, -73.7781, "America/New_York"),
    "LGA": ("New York", "US", 40.7769, -73.8740, "America/New_York"),
    "EWR": ("Newark", "US", 40.6895, -74.1745, "America/New_York"),
    "BOS": ("Boston", "US", 42.3656, -71.0096, "America/New_York"),
    "PHL": ("Philadelphia", "US", 39.8744, -75.2424, "America/New_York"),
    "DCA": ("Washington", "US", 38.8512, -77.0402, "America/New_York"),
    "IAD": ("Washington", "US", 38.9531, -77.4565, "America/New_York"),
    "BWI": ("Baltimore", "US", 39.1774, -76.6684, "America/New_York"),
    "ATL": ("Atlanta", "US", 33.6407, -84.4277, "America/New_York"),
    "CLT": ("Charlotte", "US", 35.2140, -80.9431, "America/New_York"),
    "RDU": ("Raleigh", "US", 35.8801, -78.7880, "America/New_York"),
    "MIA": ("Miami", "US", 25.7959, -80.2870, "America/New_York"),
    "FLL": ("Fort Lauderdale", "US", 26.0742, -80.1506, "America/New_York"),
    "MCO": ("Orlando", "US", 28.4312, -81.3081, "America/New_York"),
    "TPA": ("Tampa", "US", 27.9755, -82.5332, "America/New_York"),
    "PIT": ("Pittsburgh", "US", 40.4915, -80.2329, "America/New_York"),
    "DTW": ("Detroit", "US", 42.2162, -83.3554, "America/Detroit"),
    "CLE": ("Cleveland", "US", 41.4117, -81.8498, "America/New_York"),
    "CVG": ("Cincinnati", "US", 39.0489, -84.6678, "America/New_York"),
    "IND": ("Indianapolis", "US", 39.7173, -86.2944, "America/Indiana/Indianapolis"),
    "SJU": ("San Juan", "PR", 18.4394, -66.0018, "America/Puerto_Rico"),
    # === US CENTRAL ===
    "ORD": ("Chicago", "US", 41.9742, -87.9073, "America/Chicago"),
    "MDW": ("Chicago", "US", 41.7868, -87.7522, "America/Chicago"),
    "DFW": ("Dallas", "US", 32.8975, -97.0403, "America/Chicago"),
    "DAL": ("Dallas", "US", 32.8471, -96.8518, "America/Chicago"),
    "IAH": ("Houston", "US", 29.9902, -95.3368, "America/Chicago"),
    "HOU": ("Houston", "US", 29.6454, -95.2789, "America/Chicago"),
    "AUS": ("Austin", "US", 30.1975, -97.6664, "America/Chicago"),
    "SAT": ("San Antonio", "US", 29.5337, -98.4698, "America/Chicago"),
    "MSP": ("Minneapolis", "US", 44.8848, -93.2223, "America/Chicago"),
    "STL": ("St. Louis", "US", 38.7499, -90.3748, "America/Chicago"),
    "MCI": ("Kansas City", "US", 39.2976, -94.7139, "America/Chicago"),
    "MKE": ("Milwaukee", "US", 42.9472, -87.8966, "America/Chicago"),
    "MSY": ("New Orleans", "US", 29.9911, -90.2592, "America/Chicago"),
    "BNA": ("Nashville", "US", 36.1263, -86.6774, "America/Chicago"),
    "MEM": ("Memphis", "US", 35.0424, -89.9767, "America/Chicago"),
    "OKC": ("Oklahoma City", "US", 35.3931, -97.6007, "America/Chicago"),
    # === US MOUNTAIN ===
    "DEN": ("Denver", "US", 39.8561, -104.6737, "America/Denver"),
    "SLC": ("Salt Lake City", "US", 40.7899, -111.9791, "America/Denver"),
    "ABQ": ("Albuquerque", "US", 35.0402, -106.6090, "America/Denver"),
    "BOI": ("Boise", "US", 43.5644, -116.2228, "America/Boise"),
    "PHX": ("Phoenix", "US", 33.4352, -112.0101, "America/Phoenix"),
    "TUS": ("Tucson", "US", 32.1161, -110.9410, "America/Phoenix"),
    # === US PACIFIC ===
    "LAX": ("Los Angeles", "US", 33.9425, -118.4081, "America/Los_Angeles"),
    "SFO": ("San Francisco", "US", 37.6213, -122.3790, "America/Los_Angeles"),
    "SJC": ("San Jose", "US", 37.3639, -121.9289, "America/Los_Angeles"),
    "OAK": ("Oakland", "US", 37.7126, -122.2197, "America/Los_Angeles"),
    "SAN": ("San Diego", "US", 32.7338, -117.1933, "America/Los_Angeles"),
    "SMF": ("Sacramento", "US", 38.6954, -121.5908, "America/Los_Angeles"),
    "BUR": ("Burbank", "US", 34.2007, -118.3590, "America/Los_Angeles"),
    "SNA": ("Santa Ana", "US", 33.6762, -117.8675, "America/Los_Angeles"),
    "ONT": ("Ontario", "US", 34.0560, -117.6012, "America/Los_Angeles"),
    "LAS": ("Las Vegas", "US", 36.0840, -115.1537, "America/Los_Angeles"),
    "SEA": ("Seattle", "US", 47.4502, -122.3088, "America/Los_Angeles"),
    "PDX": ("Portland", "US", 45.5898, -122.5951, "America/Los_Angeles"),
    "ANC": ("Anchorage", "US", 61.1743, -149.9962, "America/Anchorage"),
    "HNL": ("Honolulu", "US", 21.3187, -157.9225, "Pacific/Honolulu"),
    "OGG": ("Kahului", "US", 20.8986, -156.4305, "Pacific/Honolulu"),
    "KOA": ("Kona", "US", 19.7388, -156.0456, "Pacific/Honolulu"),
    # === CANADA / MEXICO / CARIBBEAN ===
    "YYZ": ("Toronto", "CA", 43.6777, -79.6248, "America/Toronto"),
    "YUL": ("Montreal", "CA", 45.4706, -73.7408, "America/Toronto"),
    "YVR": ("Vancouver", "CA", 49.1967, -123.1815, "America/Vancouver"),
    "YYC": ("Calgary", "CA", 51.1215, -114.0076, "America/Edmonton"),
    "MEX": ("Mexico City", "MX", 19.4361, -99.0719, "America/Mexico_City"),
    "CUN": ("Cancun", "MX", 21.0365, -86.8771, "America/Cancun"),
    "GDL": ("Guadalajara", "MX", 20.5218, -103.3112, "America/Mexico_City"),
    "PTY": ("Panama City", "PA", 9.0714, -79.3835, "America/Panama"),
    "NAS": ("Nassau", "BS", 25.0390, -77.4662, "America/Nassau"),
    "MBJ": ("Montego Bay", "JM", 18.5037, -77.9134, "America/Jamaica"),
    # === SOUTH AMERICA ===
    "GRU": ("Sao Paulo", "BR", -23.4356, -46.4731, "America/Sao_Paulo"),
    "GIG": ("Rio de Janeiro", "BR", -22.8100, -43.2506, "America/Sao_Paulo"),
    "EZE": ("Buenos Aires", "AR", -34.8222, -58.5358, "America/Argentina/Buenos_Aires"),
    "SCL": ("Santiago", "CL", -33.3930, -70.7858, "America/Santiago"),
    "LIM": ("Lima", "PE", -12.0219, -77.1143, "America/Lima"),
    "BOG": ("Bogota", "CO", 4.7016, -74.1469, "America/Bogota"),
    # === EUROPE ===
    "LHR": ("London", "GB", 51.4700, -0.4543, "Europe/London"),
    "LGW": ("London", "GB", 51.1537, -0.1821, "Europe/London"),
    "STN": ("London", "GB", 51.8860, 0.2389, "Europe/London"),
    "MAN": ("Manchester", "GB", 53.3537, -2.2750, "Europe/London"),
    "EDI": ("Edinburgh", "GB", 55.9508, -3.3615, "Europe/London"),
    "DUB": ("Dublin", "IE", 53.4264, -6.2499, "Europe/Dublin"),
    "CDG": ("Paris", "FR", 49.0097, 2.5479, "Europe/Paris"),
    "ORY": ("Paris", "FR", 48.7262, 2.3652, "Europe/Paris"),
    "NCE": ("Nice", "FR", 43.6584, 7.2159, "Europe/Paris"),
    "AMS": ("Amsterdam", "NL", 52.3105, 4.7683, "Europe/Amsterdam"),
    "BRU": ("Brussels", "BE", 50.9010, 4.4856, "Europe/Brussels"),
    "FRA": ("Frankfurt", "DE", 50.0379, 8.5622, "Europe/Berlin"),
    "MUC": ("Munich", "DE", 48.3537, 11.7750, "Europe/Berlin"),
    "BER": ("Berlin", "DE", 52.3667, 13.5033, "Europe/Berlin"),
    "DUS": ("Dusseldorf", "DE", 51.2895, 6.7668, "Europe/Berlin"),
    "ZRH": ("Zurich", "CH", 47.4582, 8.5555, "Europe/Zurich"),
    "GVA": ("Geneva", "CH", 46.2370, 6.1092, "Europe/Zurich"),
    "VIE": ("Vienna", "AT", 48.1103, 16.5697, "Europe/Vienna"),
    "MAD": ("Madrid", "ES", 40.4983, -3.5676, "Europe/Madrid"),
    "BCN": ("Barcelona", "ES", 41.2974, 2.0833, "Europe/Madrid"),
    "PMI": ("Palma", "ES", 39.5517, 2.7388, "Europe/Madrid"),
    "LIS": ("Lisbon", "PT", 38.7742, -9.1342, "Europe/Lisbon"),
    "FCO": ("Rome", "IT", 41.8003, 12.2389, "Europe/Rome"),
    "MXP": ("Milan", "IT", 45.6306, 8.7281, "Europe/Rome"),
    "VCE": ("Venice", "IT", 45.5053, 12.3519, "Europe/Rome"),
    "ATH": ("Athens", "GR", 37.9364, 23.9445, "Europe/Athens"),
    "IST": ("Istanbul", "TR", 41.2753, 28.7519, "Europe/Istanbul"),
    "CPH": ("Copenhagen", "DK", 55.6180, 12.6508, "Europe/Copenhagen"),
    "ARN": ("Stockholm", "SE", 59.6498, 17.9238, "Europe/Stockholm"),
    "OSL": ("Oslo", "NO", 60.1976, 11.1004, "Europe/Oslo"),
    "HEL": ("Helsinki", "FI", 60.3172, 24.9633, "Europe/Helsinki"),
    "WAW": ("Warsaw", "PL", 52.1657, 20.9671, "Europe/Warsaw"),
    "PRG": ("Prague", "CZ", 50.1008, 14.2600, "Europe/Prague"),
    "BUD": ("Budapest", "HU", 47.4298, 19.2611, "Europe/Budapest"),
    "KEF": ("Reykjavik", "IS", 63.9850, -22.6056, "Atlantic/Reykjavik"),
    # === MIDDLE EAST / AFRICA ===
    "DXB": ("Dubai", "AE", 25.2532, 55.3657, "Asia/Dubai"),
    "AUH": ("Abu Dhabi", "AE", 24.4330, 54.6511, "Asia/Dubai"),
    "DOH": ("Doha", "QA", 25.2731, 51.6081, "Asia/Qatar"),
    "RUH": ("Riyadh", "SA", 24.9576, 46.6988, "Asia/Riyadh"),
    "TLV": ("Tel Aviv", "IL", 32.0055, 34.8854, "Asia/Jerusalem"),
    "CAI": ("Cairo", "EG", 30.1219, 31.4056, "Africa/Cairo"),
    "JNB": ("Johannesburg", "ZA", -26.1392, 28.2460, "Africa/Johannesburg"),
    "CPT": ("Cape Town", "ZA", -33.9715, 18.6021, "Africa/Johannesburg"),
    "NBO": ("Nairobi", "KE", -1.3192, 36.9278, "Africa/Nairobi"),
    "CMN": ("Casablanca", "MA", 33.3675, -7.5900, "Africa/Casablanca"),
    # === ASIA / PACIFIC ===
    "NRT": ("Tokyo", "JP", 35.7720, 140.3929, "Asia/Tokyo"),
    "HND": ("Tokyo", "JP", 35.5494, 139.7798, "Asia/Tokyo"),
    "KIX": ("Osaka", "JP", 34.4320, 135.2304, "Asia/Tokyo"),
    "ICN": ("Seoul", "KR", 37.4602, 126.4407, "Asia/Seoul"),
    "PEK": ("Beijing", "CN", 40.0799, 116.6031, "Asia/Shanghai"),
    "PVG": ("Shanghai", "CN", 31.1443, 121.8083, "Asia/Shanghai"),
    "HKG": ("Hong Kong", "HK", 22.3080, 113.9185, "Asia/Hong_Kong"),
    "TPE": ("Taipei", "TW", 25.0797, 121.2342, "Asia/Taipei"),
    "SIN": ("Singapore", "SG", 1.3644, 103.9915, "Asia/Singapore"),
    "BKK": ("Bangkok", "TH", 13.6900, 100.7501, "Asia/Bangkok"),
    "KUL": ("Kuala Lumpur", "MY", 2.7456, 101.7099, "Asia/Kuala_Lumpur"),
    "CGK": ("Jakarta", "ID", -6.1256, 106.6558, "Asia/Jakarta"),
    "MNL": ("Manila", "PH", 14.5086, 121.0194, "Asia/Manila"),
    "DEL": ("Delhi", "IN", 28.5562, 77.1000, "Asia/Kolkata"),
    "BOM": ("Mumbai", "IN", 19.0896, 72.8656, "Asia/Kolkata"),
    "SYD": ("Sydney", "AU", -33.9399, 151.1753, "Australia/Sydney"),
    "MEL": ("Melbourne", "AU", -37.6690, 144.8410, "Australia/Melbourne"),
    "BNE": ("Brisbane", "AU", -27.3842, 153.1175, "Australia/Brisbane"),
    "AKL": ("Auckland", "NZ", -37.0082, 174.7850, "Pacific/Auckland"),
}

# Frequent single-character misreads of real codes
AIRPORT_OCR_CONFUSIONS: dict[str, str] = {
    "IAX": "LAX",
    "JEK": "JFK",
    "OPD": "ORD",
    "ATI": "ATL",
    "DFM": "DFW",
    "SFD": "SFO",
    "MLA": "MIA",
    "M1A": "MIA",
    "B0S": "BOS",
    "LHE": "LHR",
    "CDO": "CDG",
    "0RD": "ORD",
    "SE4": "SEA",
}

# Visually similar glyph pairs used to propose a single-substitution fix
GLYPH_CONFUSIONS: dict[str, str] = {
    "0": "O",
    "O": "0",
    "1": "I",
    "I": "1",
    "L": "I",
    "5": "S",
    "S": "5",
    "8": "B",
    "B": "8",
    "2": "Z",
    "Z": "2",
    "6": "G",
    "G": "6",
}
