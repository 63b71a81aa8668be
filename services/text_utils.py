import unicodedata


def search_key(s) -> str:
    """Fold a Pokémon name for substring search: accents stripped, lowercase,
    gender symbols spelled out, punctuation and spaces removed.
    "Flabébé" -> "flabebe", "Nidoran♀" -> "nidoranf", "Mr. Mime" -> "mrmime".
    """
    if s is None:
        return ''
    if not isinstance(s, str):
        s = str(s)
    s = unicodedata.normalize('NFKD', s.strip())
    s = ''.join(c for c in s if not unicodedata.combining(c))
    s = s.lower().replace('♂', 'm').replace('♀', 'f')
    return ''.join(ch for ch in s if ch.isalnum())
