"""
Built-in word categories.

These are installed whenever the stored category collection is missing or
fails validation. Each preset carries fifty words.
"""

from typing import List, TypedDict


class PresetCategory(TypedDict):
    """Raw shape of a built-in category."""
    id: str
    name: str
    words: List[str]


DEFAULT_CATEGORIES: List[PresetCategory] = [
    {
        "id": "frutas",
        "name": "Frutas",
        "words": [
            "manzana", "banana", "naranja", "pera", "frutilla", "uva", "sandía", "melón", "kiwi", "ciruela",
            "durazno", "mango", "papaya", "ananá", "cereza", "arándano", "frambuesa", "mora", "pomelo", "limón",
            "mandarina", "damasco", "higo", "granada", "maracuyá", "lichi", "guayaba", "tuna", "coco", "carambola",
            "caqui", "membrillo", "tamarindo", "bergamota", "kumquat", "níspero", "grosella", "arándano rojo",
            "arándano negro", "grosella negra", "melocotón", "plátano", "kiwano", "physalis", "pitaya",
            "naranja sanguina", "pomelo rosado", "mamey", "moras blancas", "yacaratiá",
        ],
    },
    {
        "id": "cocina",
        "name": "Cocina",
        "words": [
            "sartén", "cuchillo", "olla", "hervir", "horno", "sal", "aceite", "receta", "tostadora", "espátula",
            "cucharón", "tabla", "pelapapas", "batidor", "colador", "microondas", "licuadora", "cucharita",
            "tenedor", "plato", "cacerola", "soplete", "cuchara", "vaso", "taza", "jarra", "cuchillo chef",
            "mortero", "rodillo", "balanza", "rallador", "mandolina", "pinza", "fuente", "rejilla", "batidora",
            "freidora", "plancha", "molde", "termómetro", "film", "aluminio", "servilleta", "individual",
            "posapavas", "abrelatas", "sifón", "pimentero", "salero", "paño",
        ],
    },
    {
        "id": "lugares",
        "name": "Lugares",
        "words": [
            "biblioteca", "aeropuerto", "playa", "montaña", "hospital", "museo", "estadio", "hotel", "teatro",
            "oficina", "plaza", "parque", "restaurante", "bar", "carnicería", "panadería", "verdulería",
            "ferretería", "escuela", "universidad", "gimnasio", "piscina", "estación", "subte", "colectora",
            "autopista", "terminal", "zoológico", "acuario", "planetario", "banco", "farmacia", "comisaría",
            "municipalidad", "embajada", "consulado", "estudio", "galería", "aula", "cancha", "patio", "terraza",
            "sótano", "ático", "cabaña", "hostel", "balneario", "mirador", "muelle", "puente",
        ],
    },
]


def get_default_categories() -> List[PresetCategory]:
    """Return a fresh copy of the presets, safe to mutate."""
    return [
        {"id": preset["id"], "name": preset["name"], "words": list(preset["words"])}
        for preset in DEFAULT_CATEGORIES
    ]
