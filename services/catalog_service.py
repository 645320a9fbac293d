import logging
from typing import Any, Dict

from flask import current_app

from app import db
from models import AgeGroup, Domain, Event, Gender, Unit, UnitType, unit_type_units
from services.scoring import catalog
from utils.cache import cache

logger = logging.getLogger(__name__)

CATALOG_CACHE_KEY = "catalog:payload"

class CatalogService:
    @staticmethod
    def seed_catalog() -> Dict[str, int]:
        """Insert any missing catalog rows from the static catalog.

        Rows are matched on their value key (age groups on their bounds), so
        running this twice creates nothing the second time. Returns the number
        of rows created per entity type.
        """
        created = {'genders': 0, 'age_groups': 0, 'domains': 0, 'units': 0, 'unit_types': 0, 'events': 0}

        try:
            for gender in catalog.GENDERS:
                if not Gender.query.filter_by(value=gender.value).first():
                    db.session.add(Gender(value=gender.value, label=gender.label))
                    created['genders'] += 1

            for group in catalog.AGE_GROUPS:
                if not AgeGroup.query.filter_by(lower_bound=group.lower_bound, upper_bound=group.upper_bound).first():
                    db.session.add(AgeGroup(lower_bound=group.lower_bound, upper_bound=group.upper_bound))
                    created['age_groups'] += 1

            domains = {}
            for domain in catalog.DOMAINS:
                row = Domain.query.filter_by(value=domain.value).first()
                if not row:
                    row = Domain(value=domain.value, label=domain.label,
                                 mobile_label=domain.mobile_label, logo=domain.logo)
                    db.session.add(row)
                    created['domains'] += 1
                domains[domain.value] = row

            units = {}
            for unit in catalog.UNITS:
                row = Unit.query.filter_by(value=unit.value).first()
                if not row:
                    row = Unit(value=unit.value, label=unit.label)
                    db.session.add(row)
                    created['units'] += 1
                units[unit.value] = row

            db.session.flush()

            unit_types = {}
            for unit_type in catalog.UNIT_TYPES:
                row = UnitType.query.filter_by(value=unit_type.value).first()
                if not row:
                    row = UnitType(value=unit_type.value, label=unit_type.label)
                    db.session.add(row)
                    db.session.flush()
                    for position, unit in enumerate(unit_type.units):
                        db.session.execute(unit_type_units.insert().values(
                            unit_type_id=row.id, unit_id=units[unit.value].id, position=position,
                        ))
                    created['unit_types'] += 1
                unit_types[unit_type.value] = row

            for event in catalog.EVENTS:
                if not Event.query.filter_by(value=event.value).first():
                    db.session.add(Event(
                        value=event.value,
                        label=event.label,
                        description=event.description,
                        unit_type_id=unit_types[event.unit_type.value].id,
                        domain_id=domains[event.domain.value].id,
                    ))
                    created['events'] += 1

            db.session.commit()
        except Exception as e:
            logger.error(f"Failed to seed catalog: {str(e)}")
            db.session.rollback()
            raise

        cache.delete(CATALOG_CACHE_KEY)
        logger.info(f"Catalog seeded: {created}")
        return created

    @staticmethod
    def get_catalog() -> Dict[str, Any]:
        """Catalog payload for API clients, served from cache when available"""
        payload = cache.get(CATALOG_CACHE_KEY)
        if payload is not None:
            return payload

        payload = CatalogService._build_payload()
        cache.set(CATALOG_CACHE_KEY, payload, timeout=current_app.config.get('CATALOG_CACHE_TIMEOUT', 3600))
        return payload

    @staticmethod
    def _build_payload() -> Dict[str, Any]:
        return {
            'domains': [
                {'value': d.value, 'label': d.label, 'mobile_label': d.mobile_label, 'logo': d.logo}
                for d in catalog.DOMAINS
            ],
            'unit_types': [
                {'value': t.value, 'label': t.label,
                 'units': [{'value': u.value, 'label': u.label} for u in t.units]}
                for t in catalog.UNIT_TYPES
            ],
            'events': [
                {'value': e.value, 'label': e.label, 'description': e.description,
                 'domain': e.domain.value, 'unit_type': e.unit_type.value}
                for e in catalog.EVENTS
            ],
            'genders': [{'value': g.value, 'label': g.label} for g in catalog.GENDERS],
            'age_groups': [
                {'lower_bound': g.lower_bound, 'upper_bound': g.upper_bound} for g in catalog.AGE_GROUPS
            ],
            'cohorts': [c.to_dict() for c in catalog.get_cohorts()],
        }
