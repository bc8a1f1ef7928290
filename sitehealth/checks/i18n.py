"""Check: internationalization extension available for non-default locales."""

from ..context import DEFAULT_LOCALE, INTL_EXTENSION, LOCALE, Context
from .base import Check, Severity, Verdict


class I18nCheck(Check):
    """Only meaningful when the site runs in a locale other than en_US."""

    check_id = "i18n"
    category = "internationalization"
    label = "I18n Extension Test"

    def applicable(self, context: Context) -> bool:
        locale = context.get_fact(LOCALE)
        return bool(locale) and locale != DEFAULT_LOCALE

    def evaluate(self, context: Context) -> Verdict:
        locale = context.get_fact(LOCALE)
        if context.get_fact(INTL_EXTENSION):
            return self.verdict(
                Severity.GOOD,
                "Your site uses the Intl extension",
                "Your site uses the ICU Intl extension to improve localization features. That's great.",
                locale=locale,
                intl_extension=True,
            )
        return self.verdict(
            Severity.RECOMMENDED,
            "You should use the Intl extension",
            "You should consider installing the ICU Intl extension. It would improve localization features on your site.",
            locale=locale,
            intl_extension=False,
        )
