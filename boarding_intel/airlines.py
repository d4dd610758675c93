# airlines.py
# ---------------------------------------------------------------------
# IATA airline designators seen on boarding passes. Order matters: fuzzy
# correction of an unknown prefix takes the first code within one edit,
# so the high-traffic carriers come first.

AIRLINE_CODES: dict[str, dict[str, str]] = {
    # ==== U.S. MAJOR CARRIERS ====
    "AA": {"icao": "AAL", "name": "American Airlines"},
    "UA": {"icao": "UAL", "name": "United Airlines"},
    "DL": {"icao": "DAL", "name": "Delta Air Lines"},
    "WN": {"icao": "SWA", "name": "Southwest Airlines"},
    "B6": {"icao": "JBU", "name": "JetBlue Airways"},
    "AS": {"icao": "ASA", "name": "Alaska Airlines"},
    "NK": {"icao": "NKS", "name": "Spirit Airlines"},
    "F9": {"icao": "FFT", "name": "Frontier Airlines"},
    "G4": {"icao": "AAY", "name": "Allegiant Air"},
    "SY": {"icao": "SCX", "name": "Sun Country Airlines"},
    "HA": {"icao": "HAL", "name": "Hawaiian Airlines"},
    "MX": {"icao": "MXY", "name": "Breeze Airways"},

    # ==== U.S. REGIONAL ====
    "OO": {"icao": "SKW", "name": "SkyWest Airlines"},
    "9E": {"icao": "EDV", "name": "Endeavor Air"},
    "YX": {"icao": "RPA", "name": "Republic Airways"},
    "YV": {"icao": "ASH", "name": "Mesa Airlines"},
    "OH": {"icao": "JIA", "name": "PSA Airlines"},
    "MQ": {"icao": "ENY", "name": "Envoy Air"},
    "PT": {"icao": "PDT", "name": "Piedmont Airlines"},
    "QX": {"icao": "QXE", "name": "Horizon Air"},
    "C5": {"icao": "UCA", "name": "CommutAir"},
    "G7": {"icao": "GJS", "name": "GoJet Airlines"},
    "ZW": {"icao": "AWI", "name": "Air Wisconsin"},
    "9K": {"icao": "KAP", "name": "Cape Air"},

    # ==== CANADA / LATIN AMERICA ====
    "AC": {"icao": "ACA", "name": "Air Canada"},
    "WS": {"icao": "WJA", "name": "WestJet"},
    "PD": {"icao": "POE", "name": "Porter Airlines"},
    "TS": {"icao": "TSC", "name": "Air Transat"},
    "AM": {"icao": "AMX", "name": "Aeromexico"},
    "Y4": {"icao": "VOI", "name": "Volaris"},
    "VB": {"icao": "VIV", "name": "VivaAerobus"},
    "CM": {"icao": "CMP", "name": "Copa Airlines"},
    "AV": {"icao": "AVA", "name": "Avianca"},
    "LA": {"icao": "LAN", "name": "LATAM Airlines"},
    "G3": {"icao": "GLO", "name": "Gol Linhas Aereas"},
    "AD": {"icao": "AZU", "name": "Azul Brazilian Airlines"},
    "AR": {"icao": "ARG", "name": "Aerolineas Argentinas"},

    # ==== EUROPE ====
    "BA": {"icao": "BAW", "name": "British Airways"},
    "VS": {"icao": "VIR", "name": "Virgin Atlantic"},
    "AF": {"icao": "AFR", "name": "Air France"},
    "KL": {"icao": "KLM", "name": "KLM Royal Dutch Airlines"},
    "LH": {"icao": "DLH", "name": "Lufthansa"},
    "LX": {"icao": "SWR", "name": "Swiss International Air Lines"},
    "OS": {"icao": "AUA", "name": "Austrian Airlines"},
    "SN": {"icao": "BEL", "name": "Brussels Airlines"},
    "IB": {"icao": "IBE", "name": "Iberia"},
    "VY": {"icao": "VLG", "name": "Vueling"},
    "UX": {"icao": "AEA", "name": "Air Europa"},
    "AZ": {"icao": "ITY", "name": "ITA Airways"},
    "TP": {"icao": "TAP", "name": "TAP Air Portugal"},
    "EI": {"icao": "EIN", "name": "Aer Lingus"},
    "SK": {"icao": "SAS", "name": "Scandinavian Airlines"},
    "AY": {"icao": "FIN", "name": "Finnair"},
    "DY": {"icao": "NOZ", "name": "Norwegian Air Shuttle"},
    "LO": {"icao": "LOT", "name": "LOT Polish Airlines"},
    "TK": {"icao": "THY", "name": "Turkish Airlines"},
    "PC": {"icao": "PGT", "name": "Pegasus Airlines"},
    "A3": {"icao": "AEE", "name": "Aegean Airlines"},
    "FR": {"icao": "RYR", "name": "Ryanair"},
    "U2": {"icao": "EZY", "name": "easyJet"},
    "W6": {"icao": "WZZ", "name": "Wizz Air"},
    "EW": {"icao": "EWG", "name": "Eurowings"},
    "DE": {"icao": "CFG", "name": "Condor"},
    "BT": {"icao": "BTI", "name": "airBaltic"},
    "FI": {"icao": "ICE", "name": "Icelandair"},

    # ==== MIDDLE EAST / AFRICA ====
    "EK": {"icao": "UAE", "name": "Emirates"},
    "QR": {"icao": "QTR", "name": "Qatar Airways"},
    "EY": {"icao": "ETD", "name": "Etihad Airways"},
    "SV": {"icao": "SVA", "name": "Saudia"},
    "GF": {"icao": "GFA", "name": "Gulf Air"},
    "WY": {"icao": "OMA", "name": "Oman Air"},
    "FZ": {"icao": "FDB", "name": "flydubai"},
    "LY": {"icao": "ELY", "name": "El Al"},
    "MS": {"icao": "MSR", "name": "EgyptAir"},
    "ET": {"icao": "ETH", "name": "Ethiopian Airlines"},
    "KQ": {"icao": "KQA", "name": "Kenya Airways"},
    "SA": {"icao": "SAA", "name": "South African Airways"},
    "AT": {"icao": "RAM", "name": "Royal Air Maroc"},

    # ==== ASIA / PACIFIC ====
    "SQ": {"icao": "SIA", "name": "Singapore Airlines"},
    "CX": {"icao": "CPA", "name": "Cathay Pacific"},
    "NH": {"icao": "ANA", "name": "All Nippon Airways"},
    "JL": {"icao": "JAL", "name": "Japan Airlines"},
    "KE": {"icao": "KAL", "name": "Korean Air"},
    "OZ": {"icao": "AAR", "name": "Asiana Airlines"},
    "CA": {"icao": "CCA", "name": "Air China"},
    "MU": {"icao": "CES", "name": "China Eastern Airlines"},
    "CZ": {"icao": "CSN", "name": "China Southern Airlines"},
    "HU": {"icao": "CHH", "name": "Hainan Airlines"},
    "CI": {"icao": "CAL", "name": "China Airlines"},
    "BR": {"icao": "EVA", "name": "EVA Air"},
    "TG": {"icao": "THA", "name": "Thai Airways"},
    "MH": {"icao": "MAS", "name": "Malaysia Airlines"},
    "GA": {"icao": "GIA", "name": "Garuda Indonesia"},
    "PR": {"icao": "PAL", "name": "Philippine Airlines"},
    "VN": {"icao": "HVN", "name": "Vietnam Airlines"},
    "AI": {"icao": "AIC", "name": "Air India"},
    "6E": {"icao": "IGO", "name": "IndiGo"},
    "AK": {"icao": "AXM", "name": "AirAsia"},
    "TR": {"icao": "TGW", "name": "Scoot"},
    "QF": {"icao": "QFA", "name": "Qantas"},
    "VA": {"icao": "VOZ", "name": "Virgin Australia"},
    "JQ": {"icao": "JST", "name": "Jetstar"},
    "NZ": {"icao": "ANZ", "name": "Air New Zealand"},
    "FJ": {"icao": "FJI", "name": "Fiji Airways"},
}

# Carrier names printed in boarding pass headers -> IATA code
AIRLINE_NAME_ALIASES: dict[str, str] = {
    "AMERICAN": "AA",
    "UNITED": "UA",
    "DELTA": "DL",
    "SOUTHWEST": "WN",
    "JETBLUE": "B6",
    "ALASKA": "AS",
    "SPIRIT": "NK",
    "FRONTIER": "F9",
    "ALLEGIANT": "G4",
    "HAWAIIAN": "HA",
    "AIR CANADA": "AC",
    "WESTJET": "WS",
    "AEROMEXICO": "AM",
    "BRITISH AIRWAYS": "BA",
    "VIRGIN ATLANTIC": "VS",
    "AIR FRANCE": "AF",
    "KLM": "KL",
    "LUFTHANSA": "LH",
    "SWISS": "LX",
    "IBERIA": "IB",
    "AER LINGUS": "EI",
    "RYANAIR": "FR",
    "EASYJET": "U2",
    "WIZZ": "W6",
    "TURKISH": "TK",
    "EMIRATES": "EK",
    "QATAR": "QR",
    "ETIHAD": "EY",
    "SINGAPORE": "SQ",
    "CATHAY": "CX",
    "QANTAS": "QF",
}

# Left-to-right / top-to-bottom order of unlabeled times per carrier
DEFAULT_TIME_ORDER: tuple[str, ...] = ("boarding", "departure", "arrival")

AIRLINE_TIME_ORDER: dict[str, tuple[str, ...]] = {
    # Low-cost European layouts print the arrival slot first
    "FR": ("arrival", "departure", "boarding"),
    "U2": ("arrival", "departure", "boarding"),
    # Asian carriers lead with the schedule, boarding last
    "SQ": ("departure", "arrival", "boarding"),
    "CX": ("departure", "arrival", "boarding"),
}
