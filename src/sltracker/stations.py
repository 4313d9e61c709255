"""Static station table for the Stockholm metro."""

import logging
from typing import Dict, List

logger = logging.getLogger(__name__)

# Unknown names resolve here (T-Centralen, the network hub)
FALLBACK_SITE_ID = "9001"

# Display name -> SL site ID
STATION_SITE_IDS: Dict[str, str] = {
    "T-Centralen": "9001",
    # Red line (13, 14)
    "Gamla stan": "9193",
    "Slussen": "9192",
    "Mariatorget": "9297",
    "Medborgarplatsen": "9191",
    "Skanstull": "9190",
    "Gullmarsplan": "9189",
    "Skärmarbrink": "9188",
    "Blåsut": "9187",
    "Sandsborg": "9186",
    "Skogskyrkogården": "9185",
    "Tallkrogen": "9184",
    "Gubbängen": "9183",
    "Hökarängen": "9182",
    "Farsta": "9181",
    "Farsta strand": "9180",
    "Hammarbyhöjden": "9179",
    "Björkhagen": "9178",
    "Kärrtorp": "9177",
    "Bagarmossen": "9176",
    "Skarpnäck": "9140",
    "Östermalmstorg": "9194",
    "Stadion": "9195",
    "Tekniska högskolan": "9196",
    "Universitetet": "9197",
    "Bergshamra": "9198",
    "Danderyds sjukhus": "9199",
    "Mörby centrum": "9200",
    "Ropsten": "9201",
    "Gärdet": "9202",
    "Karlaplan": "9203",
    "Norsborg": "9204",
    "Hallunda": "9205",
    "Alby": "9206",
    "Fittja": "9207",
    "Masmo": "9208",
    "Vårberg": "9209",
    "Vårby gård": "9210",
    "Aspudden": "9211",
    "Örnsberg": "9212",
    "Axelsberg": "9213",
    "Mälarhöjden": "9214",
    "Bredäng": "9215",
    "Sätra": "9216",
    "Skärholmen": "9217",
    "Vårby": "9218",
    "Fruängen": "9219",
    "Västertorp": "9220",
    "Hägerstensåsen": "9262",
    "Telefonplan": "9221",
    "Midsommarkransen": "9222",
    "Globen": "9223",
    "Enskede gård": "9224",
    # Green line (17, 18, 19)
    "Hässelby strand": "9100",
    "Hässelby gård": "9101",
    "Johannelund": "9102",
    "Vällingby": "9103",
    "Råcksta": "9104",
    "Blackeberg": "9105",
    "Islandstorget": "9106",
    "Ängbyplan": "9107",
    "Åkeshov": "9108",
    "Brommaplan": "9109",
    "Abrahamsberg": "9110",
    "Stora mossen": "9111",
    "Alvik": "9112",
    "Kristineberg": "9113",
    "Thorildsplan": "9114",
    "Fridhemsplan": "9115",
    "Odenplan": "9117",
    "Rådmansgatan": "9118",
    "Hötorget": "9119",
    "Hagsätra": "9225",
    "Rågsved": "9226",
    "Huddinge": "9227",
    "Flemingsberg": "9228",
    "Tullinge": "9229",
    "Tumba": "9230",
    "Rönninge": "9231",
    "Österhaninge": "9232",
    "Handen": "9233",
    "Vendelsö": "9234",
    "Trångsund": "9235",
    "Skogås": "9236",
    # Blue line (10, 11)
    "Kungsträdgården": "9237",
    "Rådhuset": "9238",
    "Stadshagen": "9239",
    "S:t Eriksplan": "9240",
    "Solnacentrum": "9241",
    "Västra skogen": "9242",
    "Huvudsta": "9243",
    "Solna strand": "9244",
    "Sundbybergs centrum": "9245",
    "Duvbo": "9246",
    "Sollentuna": "9247",
    "Rösersberg": "9248",
    "Hjulsta": "9249",
    "Tensta": "9250",
    "Rinkeby": "9251",
    "Spånga": "9252",
    "Sollentuna centrum": "9253",
    "Akalla": "9254",
    "Kista": "9255",
    "Husby": "9256",
    "Kungens kurva": "9257",
}

# Alternate spellings accepted by resolve() but not listed in the picker
STATION_ALIASES: Dict[str, str] = {
    "T-centralen": "T-Centralen",
    "Tcentralen": "T-Centralen",
}

LINE_COLORS: Dict[str, str] = {
    "13": "red",
    "14": "red",
    "17": "green",
    "18": "green",
    "19": "green",
    "10": "blue",
    "11": "blue",
}


class StationResolver:
    """Resolves station display names to SL site IDs."""

    def __init__(self, table: Dict[str, str] = None, fallback: str = FALLBACK_SITE_ID):
        self.table: Dict[str, str] = dict(STATION_SITE_IDS if table is None else table)
        for alias, canonical in STATION_ALIASES.items():
            if canonical in self.table:
                self.table.setdefault(alias, self.table[canonical])
        self.fallback = fallback

    def resolve(self, name: str) -> str:
        """
        Get the site ID for a station name.

        Lookup is case-sensitive apart from the known aliases. Names missing from
        the table resolve to the fallback site rather than failing.

        Args:
            name: Station display name (e.g., "Slussen").

        Returns:
            Site ID string (e.g., "9192").
        """
        site_id = self.table.get(name)
        if site_id is None:
            logger.debug(f"Unknown station '{name}', using fallback site {self.fallback}")
            return self.fallback
        return site_id

    def station_names(self) -> List[str]:
        """All canonical station names, sorted."""
        aliases = set(STATION_ALIASES)
        return sorted(name for name in self.table if name not in aliases)

    def find_stations_by_name(self, query: str) -> List[str]:
        """Find stations by name (case-insensitive partial match)."""
        query_lower = query.strip().lower()
        if not query_lower:
            return self.station_names()
        return [name for name in self.station_names() if query_lower in name.lower()]


def line_color(designation: str) -> str:
    """Colour name for a metro line designation ("grey" for unknown lines)."""
    return LINE_COLORS.get(designation, "grey")
