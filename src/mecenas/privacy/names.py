"""Common Polish first names and surnames for freestanding name detection.

Matching is conservative: a capitalized word sequence only counts as a
person name when the first word is a known first name and the last word a
known surname.
"""

import re

FIRST_NAMES_MALE = frozenset(
    {
        "Adam", "Adrian", "Aleksander", "Andrzej", "Antoni", "Arkadiusz", "Artur",
        "Bartłomiej", "Bartosz", "Bogdan", "Bogusław", "Cezary", "Damian", "Daniel",
        "Dariusz", "Dawid", "Dominik", "Edward", "Ernest", "Filip", "Franciszek",
        "Gabriel", "Grzegorz", "Henryk", "Hubert", "Igor", "Ireneusz", "Jacek",
        "Jakub", "Jan", "Janusz", "Jarosław", "Jerzy", "Józef", "Kamil", "Karol",
        "Kazimierz", "Konrad", "Krystian", "Krzysztof", "Lech", "Leszek", "Łukasz",
        "Maciej", "Marcin", "Marek", "Mariusz", "Mateusz", "Michał", "Mieczysław",
        "Mirosław", "Norbert", "Olaf", "Oskar", "Paweł", "Patryk", "Piotr",
        "Przemysław", "Radosław", "Rafał", "Robert", "Roman", "Ryszard", "Sebastian",
        "Sławomir", "Stanisław", "Stefan", "Szymon", "Tadeusz", "Tomasz", "Waldemar",
        "Wiesław", "Wiktor", "Witold", "Władysław", "Wojciech", "Zbigniew", "Zenon",
        "Zygmunt",
    }
)

FIRST_NAMES_FEMALE = frozenset(
    {
        "Agata", "Agnieszka", "Aleksandra", "Alicja", "Amelia", "Anna", "Barbara",
        "Beata", "Bożena", "Celina", "Dagmara", "Danuta", "Dorota", "Edyta",
        "Elżbieta", "Emilia", "Ewa", "Gabriela", "Grażyna", "Halina", "Hanna",
        "Helena", "Irena", "Iwona", "Izabela", "Jadwiga", "Janina", "Joanna",
        "Jolanta", "Julia", "Justyna", "Kamila", "Karolina", "Katarzyna", "Kinga",
        "Klaudia", "Krystyna", "Laura", "Lena", "Lidia", "Liliana", "Lucyna",
        "Magdalena", "Maja", "Małgorzata", "Maria", "Marlena", "Marta", "Martyna",
        "Milena", "Monika", "Nadia", "Natalia", "Nicole", "Nina", "Oliwia",
        "Patrycja", "Paulina", "Renata", "Roma", "Sandra", "Sara", "Stanisława",
        "Sylwia", "Teresa", "Urszula", "Wanda", "Weronika", "Wiktoria", "Zofia",
        "Zuzanna",
    }
)

SURNAMES = frozenset(
    {
        "Nowak", "Kowalski", "Wiśniewski", "Wójcik", "Kowalczyk", "Kamiński",
        "Lewandowski", "Zieliński", "Szymański", "Woźniak", "Dąbrowski", "Kozłowski",
        "Jankowski", "Mazur", "Kwiatkowski", "Krawczyk", "Piotrowski", "Grabowski",
        "Nowakowski", "Pawłowski", "Michalski", "Nowicki", "Adamczyk", "Dudek",
        "Zając", "Wieczorek", "Jabłoński", "Król", "Majewski", "Olszewski",
        "Jaworski", "Wróbel", "Malinowski", "Pawlak", "Witkowski", "Walczak",
        "Stępień", "Górski", "Rutkowski", "Michalak", "Sikora", "Ostrowski",
        "Baran", "Duda", "Szewczyk", "Tomaszewski", "Pietrzak", "Marciniak",
        "Wróblewski", "Zalewski", "Jakubowski", "Jasiński", "Zawadzki", "Sadowski",
        "Bąk", "Chmielewski", "Włodarczyk", "Borkowski", "Czarnecki", "Sawicki",
        "Sokołowski", "Urbański", "Kubiak", "Maciejewski", "Szczepański", "Kucharski",
        "Wilk", "Kalinowski", "Lis", "Mazurek", "Wysocki", "Adamski", "Kaźmierczak",
        "Wasilewski", "Sobczak", "Czerwiński", "Andrzejewski", "Cieślak", "Głowacki",
        "Zakrzewski", "Kołodziej", "Sikorski", "Krajewski", "Gajewski", "Szymczak",
        "Kozak", "Pawlik", "Sobczyk", "Mróz", "Laskowski", "Ziółkowski",
        # Female variants
        "Nowakowa", "Kowalska", "Wiśniewska", "Wójcikowa", "Kowalczykowa", "Kamińska",
        "Lewandowska", "Zielińska", "Szymańska", "Woźniakowa", "Dąbrowska", "Kozłowska",
        "Jankowska", "Mazurowa", "Kwiatkowska", "Krawczykowa", "Piotrowska", "Grabowska",
        "Nowakowska", "Pawłowska", "Michalska", "Nowicka", "Adamczykowa",
    }
)

FIRST_NAMES = FIRST_NAMES_MALE | FIRST_NAMES_FEMALE

_WORD = r"[A-ZŁŚŹŻĆŃĘĄÓ][a-złóśćźżęąń]+"
# Zero-width so that every capitalized word is tried as a first name
NAME_SEQUENCE = re.compile(rf"\b(?=({_WORD})\s+({_WORD})\b(?:\s+({_WORD})\b)?)")


def find_polish_names(text: str) -> list[tuple[str, int]]:
    """Find known Polish names in text.

    Recognizes "FirstName Surname" and "FirstName SecondName Surname".

    Returns:
        List of (name, index) tuples
    """
    results: list[tuple[str, int]] = []
    last_end = -1
    for m in NAME_SEQUENCE.finditer(text):
        if m.start() < last_end:
            continue
        first, second, third = m.group(1), m.group(2), m.group(3)
        if first not in FIRST_NAMES:
            continue
        if third and second in FIRST_NAMES and third in SURNAMES:
            results.append((f"{first} {second} {third}", m.start()))
            last_end = m.end(3)
        elif second in SURNAMES:
            results.append((f"{first} {second}", m.start()))
            last_end = m.end(2)
    return results
