"""This module defines the service that monitors upcoming notice deadlines for a company."""

from datetime import datetime, timedelta

from sibal.models.deadlines import (
    CalendarEvent,
    ChecklistItem,
    DeadlineAlert,
    DeadlineMonitoringResult,
    DeadlineRecommendation,
    DeadlineSummary,
    ReminderSettings,
)
from sibal.models.enums import AnalysisSource, DeadlineType, Priority, UrgencyLevel
from sibal.models.notices import Notice
from sibal.providers.config import Config, ConfigProvider
from sibal.providers.date import DateProvider
from sibal.providers.logging import Logger, LoggingProvider
from sibal.repositories.analyses import AnalysesRepository
from sibal.repositories.notices import NoticesRepository
from sibal.services.heuristics import format_brl
from sibal.services.scoring import URGENCY_ORDER, classify_deadline, upgrade_urgency
from sqlalchemy.exc import SQLAlchemyError

MIN_DAYS_AHEAD = 1
MAX_DAYS_AHEAD = 90
CALENDAR_HORIZON_DAYS = 14

DEFAULT_DEADLINE_TYPES = (DeadlineType.PROPOSAL_SUBMISSION, DeadlineType.PUBLIC_SESSION)

DEADLINE_FIELDS: dict[DeadlineType, str] = {
    DeadlineType.PROPOSAL_SUBMISSION: "submission_deadline",
    DeadlineType.OPENING: "opening_date",
    DeadlineType.PUBLIC_SESSION: "public_session_date",
    DeadlineType.APPEAL: "appeal_deadline",
}

ACTION_TEMPLATES: dict[DeadlineType, dict[str, list[str]]] = {
    DeadlineType.PROPOSAL_SUBMISSION: {
        "past": ["URGENTE: Prazo vencido - verificar possibilidade de recurso"],
        "tomorrow": [
            "CRÍTICO: Finalizar e entregar proposta hoje",
            "Verificar documentação completa",
            "Confirmar forma de entrega",
        ],
        "three_days": [
            "Revisar proposta técnica",
            "Finalizar proposta comercial",
            "Preparar documentação de habilitação",
        ],
        "week": ["Elaborar proposta técnica", "Calcular custos e preços", "Reunir documentação necessária"],
        "later": [
            "Analisar edital detalhadamente",
            "Avaliar viabilidade de participação",
            "Formar equipe de elaboração",
        ],
    },
    DeadlineType.OPENING: {
        "past": ["Acompanhar resultado da abertura"],
        "tomorrow": ["Preparar para acompanhar abertura", "Verificar local e horário"],
        "later": ["Aguardar data de abertura", "Monitorar possíveis alterações"],
    },
    DeadlineType.PUBLIC_SESSION: {
        "past": ["Acompanhar o resultado da sessão pública"],
        "tomorrow": ["Confirmar credenciamento para a sessão pública", "Preparar representante para a fase de lances"],
        "later": ["Acompanhar avisos e esclarecimentos do edital", "Definir estratégia de lances"],
    },
    DeadlineType.APPEAL: {
        "past": ["Verificar desfecho do prazo recursal"],
        "tomorrow": ["Protocolar recurso ou contrarrazões hoje"],
        "later": ["Analisar a ata da sessão", "Avaliar fundamentos para recurso"],
    },
}

CHECKLIST_TEMPLATES: dict[DeadlineType, list[tuple[str, int, Priority]]] = {
    DeadlineType.PROPOSAL_SUBMISSION: [
        ("Análise completa do edital", 5, Priority.HIGH),
        ("Proposta técnica elaborada", 3, Priority.HIGH),
        ("Proposta comercial finalizada", 2, Priority.HIGH),
        ("Documentação de habilitação reunida", 2, Priority.MEDIUM),
        ("Revisão final da proposta", 1, Priority.HIGH),
    ],
    DeadlineType.OPENING: [
        ("Confirmar local e horário da abertura", 1, Priority.MEDIUM),
    ],
    DeadlineType.PUBLIC_SESSION: [
        ("Credenciamento no sistema de compras", 2, Priority.HIGH),
        ("Definição do preço mínimo de lance", 1, Priority.HIGH),
    ],
    DeadlineType.APPEAL: [
        ("Análise da ata e da decisão", 2, Priority.HIGH),
        ("Redação do recurso", 1, Priority.HIGH),
    ],
}


def actions_for(deadline_type: DeadlineType, days_remaining: int) -> list[str]:
    """Returns the templated actions for a deadline.

    Args:
        deadline_type: The kind of deadline.
        days_remaining: Whole days until the deadline.

    Returns:
        The actions the company should take now.
    """
    templates = ACTION_TEMPLATES[deadline_type]
    if days_remaining <= 0:
        bucket = "past"
    elif days_remaining == 1:
        bucket = "tomorrow"
    elif days_remaining <= 3 and "three_days" in templates:
        bucket = "three_days"
    elif days_remaining <= 7 and "week" in templates:
        bucket = "week"
    else:
        bucket = "later"
    return list(templates[bucket])


def checklist_for(deadline_type: DeadlineType, deadline: datetime, now: datetime) -> list[ChecklistItem]:
    """Builds the preparation checklist of a deadline.

    Each item is due a fixed number of days before the deadline, but never
    earlier than one day from now, nor later than the deadline itself.

    Args:
        deadline_type: The kind of deadline.
        deadline: The deadline instant.
        now: The reference instant.

    Returns:
        The checklist items, in template order.
    """
    deadline = DateProvider.as_utc(deadline)
    floor = min(DateProvider.shift_days(DateProvider.as_utc(now), 1), deadline)
    return [
        ChecklistItem(item=item, deadline=max(DateProvider.shift_days(deadline, -offset), floor), priority=priority)
        for item, offset, priority in CHECKLIST_TEMPLATES[deadline_type]
    ]


class DeadlineMonitorService:
    """Builds deadline alerts, recommendations and calendar events for a company."""

    notices_repo: NoticesRepository
    analyses_repo: AnalysesRepository | None
    config: Config
    logger: Logger

    def __init__(
        self,
        notices_repo: NoticesRepository,
        analyses_repo: AnalysesRepository | None = None,
        config: Config | None = None,
    ) -> None:
        """Initializes the service with its dependencies.

        Args:
            notices_repo: The repository used to find notices and follows.
            analyses_repo: The repository used to store results. Results are
                not stored when it is omitted.
            config: The application configuration.
        """
        self.notices_repo = notices_repo
        self.analyses_repo = analyses_repo
        self.config = config or ConfigProvider.get_config()
        self.logger = LoggingProvider().get_logger()

    def monitor(
        self,
        company_id: str,
        days_ahead: int | None = None,
        deadline_types: list[DeadlineType] | None = None,
        now: datetime | None = None,
    ) -> DeadlineMonitoringResult:
        """Monitors the deadlines of the notices closing in the next days.

        Args:
            company_id: The company the monitoring is for.
            days_ahead: How many days ahead to look, from 1 to 90.
            deadline_types: Which deadlines to track; defaults to proposal
                submission and public session.
            now: The reference instant, mostly for tests.

        Returns:
            The monitoring result.

        Raises:
            ValueError: If `days_ahead` is out of range.
        """
        window = days_ahead if days_ahead is not None else self.config.DEADLINE_DEFAULT_DAYS_AHEAD
        if not MIN_DAYS_AHEAD <= window <= MAX_DAYS_AHEAD:
            raise ValueError(f"days_ahead must be between {MIN_DAYS_AHEAD} and {MAX_DAYS_AHEAD}, got {window}.")
        types = list(dict.fromkeys(deadline_types or DEFAULT_DEADLINE_TYPES))
        reference = DateProvider.as_utc(now or DateProvider.now())

        notices = self.notices_repo.list_notices_by_deadline_window(
            reference, DateProvider.shift_days(reference, window)
        )
        followed = self._followed_notice_ids(company_id)
        self.logger.info(
            f"Monitoring {len(notices)} notices for company {company_id} "
            f"({window} days ahead, {len(followed)} followed)."
        )

        alerts = [
            alert
            for notice in notices
            for deadline_type in types
            if (alert := self.build_alert(notice, deadline_type, reference, notice.id in followed)) is not None
        ]
        alerts.sort(key=lambda alert: (-URGENCY_ORDER[alert.urgency_level], alert.days_remaining))
        alerts = alerts[: self.config.DEADLINE_MAX_ALERTS]

        result = DeadlineMonitoringResult(
            company_id=company_id,
            monitoring_date=reference,
            days_ahead=window,
            total_deadlines=len(alerts),
            critical_deadlines=sum(
                1 for alert in alerts if alert.urgency_level == UrgencyLevel.CRITICAL or alert.days_remaining <= 2
            ),
            alerts=alerts,
            summary=self.summarize(alerts),
            recommendations=self.recommend(alerts),
            calendar_events=self.calendar_events(alerts),
            source=AnalysisSource.HEURISTIC,
        )
        if self.analyses_repo is not None:
            self.analyses_repo.save_deadline_monitoring_result(result)
        return result

    def _followed_notice_ids(self, company_id: str) -> set[str]:
        """Looks up the followed notices, treating a failed lookup as none."""
        try:
            return self.notices_repo.list_followed_notice_ids(company_id)
        except SQLAlchemyError as e:
            self.logger.warning(f"Could not load followed notices for company {company_id}: {e}")
            return set()

    @staticmethod
    def build_alert(
        notice: Notice, deadline_type: DeadlineType, now: datetime, followed: bool = False
    ) -> DeadlineAlert | None:
        """Builds the alert of one deadline of one notice.

        Args:
            notice: The notice.
            deadline_type: Which of its deadlines to look at.
            now: The reference instant.
            followed: Whether the company follows the notice, which raises
                the urgency by one tier.

        Returns:
            The alert, or None when the notice has no such deadline.
        """
        deadline: datetime | None = getattr(notice, DEADLINE_FIELDS[deadline_type])
        if deadline is None:
            return None
        days_remaining = DateProvider.days_until(deadline, now)
        status, urgency = classify_deadline(days_remaining)
        if followed:
            urgency = upgrade_urgency(urgency)
        return DeadlineAlert(
            notice_id=notice.id,
            notice_title=notice.title,
            organ=notice.organ,
            deadline_type=deadline_type,
            deadline_label=deadline_type.label,
            deadline_date=DateProvider.as_utc(deadline),
            days_remaining=days_remaining,
            urgency_level=urgency,
            status=status,
            followed=followed,
            estimated_value=notice.estimated_value,
            actions_required=actions_for(deadline_type, days_remaining),
            preparation_checklist=checklist_for(deadline_type, deadline, now),
        )

    @staticmethod
    def summarize(alerts: list[DeadlineAlert]) -> DeadlineSummary:
        """Counts the alerts per time bucket."""
        summary = DeadlineSummary()
        for alert in alerts:
            if alert.days_remaining < 0:
                summary.overdue += 1
            elif alert.days_remaining == 0:
                summary.today += 1
            elif alert.days_remaining <= 7:
                summary.this_week += 1
            elif alert.days_remaining <= 14:
                summary.next_week += 1
        return summary

    @staticmethod
    def recommend(alerts: list[DeadlineAlert]) -> list[DeadlineRecommendation]:
        """Derives prioritized recommendations from the alert buckets.

        Args:
            alerts: The sorted, capped alerts.

        Returns:
            The recommendations, highest priority first.
        """
        recommendations: list[DeadlineRecommendation] = []
        critical = sum(1 for alert in alerts if alert.urgency_level == UrgencyLevel.CRITICAL)
        today = sum(1 for alert in alerts if alert.days_remaining == 0)
        soon = sum(1 for alert in alerts if 0 < alert.days_remaining <= 3)

        if critical:
            recommendations.append(
                DeadlineRecommendation(
                    priority=Priority.HIGH,
                    action=f"Ação imediata necessária para {critical} prazo(s) crítico(s)",
                    deadline="Imediato",
                    impact="Evitar perda de oportunidades",
                )
            )
        if today:
            recommendations.append(
                DeadlineRecommendation(
                    priority=Priority.HIGH,
                    action=f"Finalizar {today} proposta(s) com prazo hoje",
                    deadline="Hoje",
                    impact="Participação nas licitações",
                )
            )
        if soon:
            recommendations.append(
                DeadlineRecommendation(
                    priority=Priority.MEDIUM,
                    action=f"Acelerar preparação de {soon} proposta(s) com prazo próximo",
                    deadline="3 dias",
                    impact="Qualidade das propostas",
                )
            )
        if len(alerts) > 10:
            recommendations.append(
                DeadlineRecommendation(
                    priority=Priority.LOW,
                    action="Considerar priorização de licitações mais estratégicas",
                    deadline="1 semana",
                    impact="Otimização de recursos",
                )
            )
        return recommendations

    @staticmethod
    def calendar_events(alerts: list[DeadlineAlert]) -> list[CalendarEvent]:
        """Creates calendar events for the deadlines of the next two weeks."""
        events: list[CalendarEvent] = []
        for alert in alerts:
            if not 0 <= alert.days_remaining <= CALENDAR_HORIZON_DAYS:
                continue
            value_text = format_brl(alert.estimated_value) if alert.estimated_value is not None else "N/A"
            events.append(
                CalendarEvent(
                    title=f"{alert.deadline_label}: {alert.notice_title}",
                    date=alert.deadline_date,
                    type=alert.deadline_type.value,
                    description=f"{alert.organ} - Valor: R$ {value_text}",
                    reminder_settings=ReminderSettings(
                        days_before=[0, 1, 3] if alert.urgency_level == UrgencyLevel.CRITICAL else [1, 3, 7]
                    ),
                )
            )
        return events
