import re
import unicodedata


def slugify(text: str) -> str:
    """
    Genera un slug a partir de un texto, normalizando tildes y caracteres especiales.

    Ejemplos:
    - "Foto Perfil" -> "foto-perfil"
    - "Añoranza Élite" -> "anoranza-elite"
    - "../../etc/passwd" -> "etc-passwd"
    """
    if not text:
        return ""

    slug = text.lower().strip()

    # NFD separa caracteres base de diacríticos
    slug = unicodedata.normalize('NFD', slug)
    slug = ''.join(char for char in slug if unicodedata.category(char) != 'Mn')

    # Todo lo que no sea letra, número, guión o guión bajo pasa a ser un guión
    slug = re.sub(r'[^a-z0-9_\-]+', '-', slug)
    slug = re.sub(r'\-+', '-', slug)

    return slug.strip('-')


def split_filename(filename: str) -> tuple[str, str]:
    """
    Separa un nombre de archivo subido en (base, extensión).

    Descarta cualquier componente de directorio que envíe el navegador y
    normaliza la extensión a minúsculas ("Foto.JPG" -> ("Foto", ".jpg")).
    """
    name = re.split(r'[\\/]', filename or "")[-1]
    base, dot, ext = name.rpartition('.')
    if not dot or not base:
        return name, ""
    ext = re.sub(r'[^a-z0-9]', '', ext.lower())
    return base, f".{ext}" if ext else ""
