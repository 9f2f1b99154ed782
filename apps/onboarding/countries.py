"""
Country Codes

Paxos requires ISO 3166-1 alpha-3 codes; the wizard collects alpha-2 codes
or country names.
"""

ALPHA2_TO_ALPHA3 = {
    'US': 'USA', 'GB': 'GBR', 'CA': 'CAN', 'AU': 'AUS', 'DE': 'DEU',
    'FR': 'FRA', 'JP': 'JPN', 'IN': 'IND', 'BR': 'BRA', 'MX': 'MEX',
    'CN': 'CHN', 'KR': 'KOR', 'IT': 'ITA', 'ES': 'ESP', 'NL': 'NLD',
    'CH': 'CHE', 'SE': 'SWE', 'NO': 'NOR', 'DK': 'DNK', 'FI': 'FIN',
    'IE': 'IRL', 'NZ': 'NZL', 'SG': 'SGP', 'HK': 'HKG', 'IL': 'ISR',
    'AT': 'AUT', 'BE': 'BEL', 'PT': 'PRT', 'PL': 'POL', 'CZ': 'CZE',
    'RO': 'ROU', 'HU': 'HUN', 'GR': 'GRC', 'TW': 'TWN', 'TH': 'THA',
    'PH': 'PHL', 'MY': 'MYS', 'ID': 'IDN', 'VN': 'VNM', 'ZA': 'ZAF',
    'AE': 'ARE', 'SA': 'SAU', 'AR': 'ARG', 'CL': 'CHL', 'CO': 'COL',
    'PE': 'PER', 'NG': 'NGA', 'KE': 'KEN', 'EG': 'EGY', 'PK': 'PAK',
}

NAME_TO_ALPHA3 = {
    'united states': 'USA', 'united kingdom': 'GBR', 'canada': 'CAN',
    'australia': 'AUS', 'germany': 'DEU', 'france': 'FRA',
    'japan': 'JPN', 'south korea': 'KOR', 'singapore': 'SGP',
    'india': 'IND', 'brazil': 'BRA', 'mexico': 'MEX',
    'netherlands': 'NLD', 'switzerland': 'CHE', 'sweden': 'SWE',
    'norway': 'NOR', 'denmark': 'DNK', 'ireland': 'IRL',
    'new zealand': 'NZL', 'portugal': 'PRT', 'spain': 'ESP',
    'italy': 'ITA', 'belgium': 'BEL', 'austria': 'AUT',
    'finland': 'FIN', 'hong kong': 'HKG', 'taiwan': 'TWN',
    'israel': 'ISR', 'united arab emirates': 'ARE',
    'china': 'CHN', 'south africa': 'ZAF', 'saudi arabia': 'SAU',
    'argentina': 'ARG', 'chile': 'CHL', 'colombia': 'COL',
    'peru': 'PER', 'nigeria': 'NGA', 'kenya': 'KEN',
    'egypt': 'EGY', 'pakistan': 'PAK',
}


def to_alpha3(value: str) -> str:
    """
    Convert an alpha-2 code or a country name to alpha-3.

    Upper-case three-letter input is assumed to be alpha-3 already; anything
    unrecognised is returned unchanged.
    """
    if not value:
        return value
    if len(value) == 3 and value == value.upper():
        return value
    if len(value) == 2:
        return ALPHA2_TO_ALPHA3.get(value.upper(), value)
    return NAME_TO_ALPHA3.get(value.lower(), value)
