"""
Gabarits des e-mails transactionnels.
Chaque gabarit déclare ses variables obligatoires; les valeurs sont échappées avant rendu.
"""
import html
from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class EmailTemplate:
    subject: str
    html: str
    required: Tuple[str, ...]

    def render(self, variables: Dict[str, str]) -> Tuple[str, str]:
        missing = [k for k in self.required if not variables.get(k)]
        if missing:
            raise KeyError(f"Variables manquantes: {', '.join(missing)}")
        safe = {k: html.escape(str(v), quote=True) for k, v in variables.items()}
        return self.subject.format(**safe), self.html.format(**safe)


ONBOARDING = EmailTemplate(
    subject="Datelia — Réservez votre onboarding (essai 14 jours)",
    html="""
<p>Bonjour,</p>
<p>Merci pour votre inscription à Datelia. Pour activer votre <b>essai gratuit de 14 jours</b>, merci de réserver votre <b>rendez-vous d’onboarding (48h ouvrées)</b> :</p>
<p><a href="{calendly_link}" target="_blank" rel="noopener">Réserver mon onboarding</a></p>
<p><i>Votre période d’essai démarre après le rendez-vous.</i></p>
<p>Pour toute question ou résiliation : <a href="mailto:{support_email}">{support_email}</a>.</p>
<p>— L’équipe Datelia</p>
""",
    required=("calendly_link", "support_email"),
)

QUOTE_CREATED = EmailTemplate(
    subject="Datelia — Votre devis {quote_id}",
    html="""
<p>Bonjour,</p>
<p>Votre devis Datelia (pack <b>{pack}</b>, {team_size} utilisateur(s)) est prêt.</p>
<p><a href="{quote_url}" target="_blank" rel="noopener">Consulter et accepter le devis</a></p>
<p>Pour toute question : <a href="mailto:{support_email}">{support_email}</a>.</p>
<p>— L’équipe Datelia</p>
""",
    required=("quote_id", "quote_url", "support_email"),
)

TEMPLATES: Dict[str, EmailTemplate] = {
    "onboarding": ONBOARDING,
    "quote_created": QUOTE_CREATED,
}
