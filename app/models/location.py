from typing import NamedTuple


class StateCoordinates(NamedTuple):
    """Capital-city coordinates for one Nigerian state."""

    name: str
    capital: str
    latitude: float
    longitude: float


# 36 states + FCT. Immutable for the life of the process.
NIGERIAN_STATE_COORDINATES: tuple[StateCoordinates, ...] = (
    StateCoordinates("Abia", "Umuahia", 5.5333, 7.4833),
    StateCoordinates("Adamawa", "Yola", 9.2300, 12.4800),
    StateCoordinates("Akwa Ibom", "Uyo", 5.0333, 7.9167),
    StateCoordinates("Anambra", "Awka", 6.2100, 7.0700),
    StateCoordinates("Bauchi", "Bauchi", 10.3100, 9.8400),
    StateCoordinates("Bayelsa", "Yenagoa", 4.9267, 6.2676),
    StateCoordinates("Benue", "Makurdi", 7.7300, 8.5400),
    StateCoordinates("Borno", "Maiduguri", 11.8333, 13.1500),
    StateCoordinates("Cross River", "Calabar", 4.9500, 8.3250),
    StateCoordinates("Delta", "Asaba", 6.2000, 6.7300),
    StateCoordinates("Ebonyi", "Abakaliki", 6.3249, 8.1137),
    StateCoordinates("Edo", "Benin City", 6.3176, 5.6145),
    StateCoordinates("Ekiti", "Ado-Ekiti", 7.6167, 5.2167),
    StateCoordinates("Enugu", "Enugu", 6.4500, 7.5000),
    StateCoordinates("FCT", "Abuja", 9.0765, 7.3986),
    StateCoordinates("Gombe", "Gombe", 10.2897, 11.1711),
    StateCoordinates("Imo", "Owerri", 5.4833, 7.0333),
    StateCoordinates("Jigawa", "Dutse", 11.7592, 9.3389),
    StateCoordinates("Kaduna", "Kaduna", 10.5264, 7.4388),
    StateCoordinates("Kano", "Kano", 12.0000, 8.5167),
    StateCoordinates("Katsina", "Katsina", 12.9889, 7.6000),
    StateCoordinates("Kebbi", "Birnin Kebbi", 12.4539, 4.1975),
    StateCoordinates("Kogi", "Lokoja", 7.8022, 6.7333),
    StateCoordinates("Kwara", "Ilorin", 8.5000, 4.5500),
    StateCoordinates("Lagos", "Ikeja", 6.6000, 3.3500),
    StateCoordinates("Nasarawa", "Lafia", 8.4900, 8.5200),
    StateCoordinates("Niger", "Minna", 9.6139, 6.5569),
    StateCoordinates("Ogun", "Abeokuta", 7.1500, 3.3500),
    StateCoordinates("Ondo", "Akure", 7.2500, 5.1950),
    StateCoordinates("Osun", "Oshogbo", 7.7667, 4.5667),
    StateCoordinates("Oyo", "Ibadan", 7.3964, 3.9167),
    StateCoordinates("Plateau", "Jos", 9.9300, 8.8900),
    StateCoordinates("Rivers", "Port Harcourt", 4.8100, 7.0100),
    StateCoordinates("Sokoto", "Sokoto", 13.0622, 5.2339),
    StateCoordinates("Taraba", "Jalingo", 8.9000, 11.3667),
    StateCoordinates("Yobe", "Damaturu", 11.9667, 11.7000),
    StateCoordinates("Zamfara", "Gusau", 12.1642, 6.6667),
)

NIGERIAN_STATES: tuple[str, ...] = tuple(s.name for s in NIGERIAN_STATE_COORDINATES)
