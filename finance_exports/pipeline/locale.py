"""
Locale Conventions

Separators, boolean labels and calendar names used when formatting
export values. The active locale is chosen by EXPORT_LOCALE.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LocaleConventions:
    name: str
    decimal_separator: str
    group_separator: str
    true_label: str
    false_label: str
    month_names: tuple[str, ...]
    month_abbreviations: tuple[str, ...]
    # Monday first, matching datetime.weekday()
    weekday_names: tuple[str, ...]
    weekday_abbreviations: tuple[str, ...]


PT_BR = LocaleConventions(
    name="pt_BR",
    decimal_separator=",",
    group_separator=".",
    true_label="Sim",
    false_label="Não",
    month_names=(
        "janeiro", "fevereiro", "março", "abril", "maio", "junho",
        "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
    ),
    month_abbreviations=(
        "jan", "fev", "mar", "abr", "mai", "jun",
        "jul", "ago", "set", "out", "nov", "dez",
    ),
    weekday_names=(
        "segunda-feira", "terça-feira", "quarta-feira", "quinta-feira",
        "sexta-feira", "sábado", "domingo",
    ),
    weekday_abbreviations=("seg", "ter", "qua", "qui", "sex", "sáb", "dom"),
)

EN_US = LocaleConventions(
    name="en_US",
    decimal_separator=".",
    group_separator=",",
    true_label="Yes",
    false_label="No",
    month_names=(
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
    month_abbreviations=(
        "Jan", "Feb", "Mar", "Apr", "May", "Jun",
        "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
    ),
    weekday_names=(
        "Monday", "Tuesday", "Wednesday", "Thursday",
        "Friday", "Saturday", "Sunday",
    ),
    weekday_abbreviations=("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"),
)

LOCALES = {
    PT_BR.name: PT_BR,
    EN_US.name: EN_US,
}


def get_locale(name: str) -> LocaleConventions:
    """Look up locale conventions by name (e.g. 'pt_BR')."""
    try:
        return LOCALES[name]
    except KeyError:
        raise ValueError(f"Unknown locale: {name}") from None
