"""Tests for the date, time, priority and title extractors."""

from datetime import date, time

import pytest

from chatbot.schemas import Priority
from chatbot.services.entities import (
    DATE_RULES,
    TIME_RULES,
    extract_date,
    extract_priority,
    extract_time,
    extract_title,
    normalize_text,
)

WEDNESDAY = date(2026, 10, 21)


class TestNormalizeText:
    def test_folds_accents_and_case(self):
        assert normalize_text("Créer une Tâche à midi") == "creer une tache a midi"

    def test_folds_typographic_apostrophe(self):
        assert normalize_text("Aujourd’hui") == "aujourd'hui"


class TestExtractDate:
    def test_today(self):
        assert extract_date("mes taches d'aujourd'hui", WEDNESDAY) == WEDNESDAY

    def test_today_without_apostrophe(self):
        assert extract_date("taches aujourdhui", WEDNESDAY) == WEDNESDAY

    def test_tomorrow(self):
        assert extract_date("creer une tache pour demain", WEDNESDAY) == date(2026, 10, 22)

    def test_in_n_days(self):
        assert extract_date("rdv dans 3 jours", WEDNESDAY) == date(2026, 10, 24)

    @pytest.mark.parametrize("count", ["9999999", "99999999", "9" * 20])
    def test_in_n_days_past_calendar_range(self, count):
        assert extract_date(f"rdv dans {count} jours", WEDNESDAY) is None

    def test_in_one_day_singular(self):
        assert extract_date("dans 1 jour", WEDNESDAY) == date(2026, 10, 22)

    def test_weekday_is_next_occurrence(self):
        assert extract_date("reunion lundi", WEDNESDAY) == date(2026, 10, 26)

    def test_weekday_with_pour(self):
        assert extract_date("rapport pour vendredi", WEDNESDAY) == date(2026, 10, 23)

    def test_same_weekday_returns_today(self):
        assert extract_date("reunion mercredi", WEDNESDAY) == WEDNESDAY

    def test_weekday_prochain_skips_today(self):
        assert extract_date("reunion mercredi prochain", WEDNESDAY) == date(2026, 10, 28)

    def test_next_week_is_next_monday(self):
        assert extract_date("a faire semaine prochaine", WEDNESDAY) == date(2026, 10, 26)

    def test_day_of_month_later_this_month(self):
        assert extract_date("rdv le 25", WEDNESDAY) == date(2026, 10, 25)

    def test_day_of_month_today(self):
        assert extract_date("rdv le 21", WEDNESDAY) == WEDNESDAY

    def test_day_of_month_rolls_to_next_month(self):
        assert extract_date("rdv le 18", WEDNESDAY) == date(2026, 11, 18)

    def test_day_of_month_rolls_over_year_end(self):
        assert extract_date("rdv le 3", date(2026, 12, 20)) == date(2027, 1, 3)

    def test_day_missing_in_current_month_moves_on(self):
        # November has 30 days
        assert extract_date("rdv le 31", date(2026, 11, 5)) == date(2026, 12, 31)

    def test_day_missing_in_rolled_month_skips_it(self):
        # January 30 is past and February has no 30th
        assert extract_date("rdv le 30", date(2027, 1, 31)) == date(2027, 3, 30)

    def test_day_of_month_out_of_range(self):
        assert extract_date("rdv le 45", WEDNESDAY) is None

    def test_day_with_month_name(self):
        assert extract_date("rdv le 5 novembre", WEDNESDAY) == date(2026, 11, 5)

    def test_day_with_past_month_name_is_next_year(self):
        assert extract_date("rdv le 15 mars", WEDNESDAY) == date(2027, 3, 15)

    def test_invalid_day_with_month_name(self):
        assert extract_date("rdv le 30 fevrier", WEDNESDAY) is None

    def test_le_before_hour_is_not_a_date(self):
        assert extract_date("rdv le 14h", WEDNESDAY) is None

    def test_first_rule_wins(self):
        # "demain" outranks the weekday
        assert extract_date("demain ou vendredi", WEDNESDAY) == date(2026, 10, 22)

    def test_no_date(self):
        assert extract_date("creer une tache", WEDNESDAY) is None

    def test_rule_order_is_documented(self):
        names = [name for name, _, _ in DATE_RULES]
        assert names.index("today") < names.index("tomorrow") < names.index("in_days")
        assert names.index("in_days") < names.index("weekday") < names.index("day_of_month")


class TestExtractTime:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("rdv a 14h", time(14, 0)),
            ("reunion a 9h30", time(9, 30)),
            ("appel 8h 15", time(8, 15)),
            ("dejeuner midi", time(12, 0)),
            ("appel ce soir", time(18, 0)),
            ("sport le matin", time(9, 0)),
            ("reunion cet apres-midi", time(14, 0)),
        ],
    )
    def test_patterns(self, text, expected):
        assert extract_time(text) == expected

    def test_explicit_hour_wins_over_keyword(self):
        assert extract_time("ce soir a 20h") == time(20, 0)

    def test_out_of_range_hour_is_ignored(self):
        assert extract_time("a 25h") is None

    def test_out_of_range_hour_falls_through_to_keyword(self):
        assert extract_time("a 25h ce soir") == time(18, 0)

    def test_hours_duration_is_not_a_time(self):
        assert extract_time("dans 2 heures") is None

    def test_no_time(self):
        assert extract_time("creer une tache") is None

    def test_afternoon_checked_before_noon(self):
        names = [name for name, _, _ in TIME_RULES]
        assert names.index("afternoon") < names.index("noon")


class TestExtractPriority:
    def test_urgent(self):
        assert extract_priority("creer une tache urgente: bug critique") is Priority.URGENT

    def test_important(self):
        assert extract_priority("tache importante") is Priority.HIGH

    def test_not_urgent(self):
        assert extract_priority("pas urgent: ranger le bureau") is Priority.LOW

    def test_not_urgent_feminine(self):
        assert extract_priority("une tache pas urgente") is Priority.LOW

    def test_low_priority_phrase(self):
        assert extract_priority("basse priorite") is Priority.LOW

    def test_default_medium(self):
        assert extract_priority("creer une tache: finir le rapport") is Priority.MEDIUM


class TestExtractTitle:
    def test_quoted_title_verbatim(self):
        assert extract_title('Creer une tache "Appeler Élodie" demain') == "Appeler Élodie"

    def test_guillemets(self):
        assert extract_title("Note « Idées produit » pour lundi") == "Idées produit"

    def test_colon_title_capitalized(self):
        assert extract_title("Creer une tache: finir le rapport") == "Finir le rapport"

    def test_colon_title_trims_punctuation(self):
        assert extract_title("Note:   acheter du pain. ") == "Acheter du pain"

    def test_quotes_win_over_colon(self):
        assert extract_title('Tache: "Revue de code"') == "Revue de code"

    def test_clock_colon_is_not_a_separator(self):
        assert extract_title("Rdv a 14:30 avec Paul") is None

    def test_apostrophe_is_not_a_quote(self):
        assert extract_title("J'ai un rdv aujourd'hui") is None

    def test_no_title(self):
        assert extract_title("Creer une tache") is None

    def test_empty_after_colon(self):
        assert extract_title("Tache:   ") is None
