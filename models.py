from datetime import datetime
from app import db
from sqlalchemy import CheckConstraint

unit_type_units = db.Table(
    'unit_type_units',
    db.Column('unit_type_id', db.Integer, db.ForeignKey('unit_types.id', ondelete='CASCADE'), primary_key=True),
    db.Column('unit_id', db.Integer, db.ForeignKey('units.id', ondelete='CASCADE'), primary_key=True),
    db.Column('position', db.Integer, nullable=False, default=0),
)

class Gender(db.Model):
    __tablename__ = 'genders'

    id = db.Column(db.Integer, primary_key=True)
    value = db.Column(db.String(50), unique=True, nullable=False)
    label = db.Column(db.String(100), nullable=False)

    def __repr__(self):
        return f'<Gender {self.value}>'

    def to_dict(self):
        return {'id': self.id, 'value': self.value, 'label': self.label}

class AgeGroup(db.Model):
    __tablename__ = 'age_groups'
    __table_args__ = (
        CheckConstraint('lower_bound <= upper_bound', name='ck_age_group_bounds'),
        db.UniqueConstraint('lower_bound', 'upper_bound', name='uq_age_group_bounds'),
    )

    id = db.Column(db.Integer, primary_key=True)
    lower_bound = db.Column(db.Integer, nullable=False)  # inclusive, years
    upper_bound = db.Column(db.Integer, nullable=False)  # inclusive, years

    def __repr__(self):
        return f'<AgeGroup {self.lower_bound}-{self.upper_bound}>'

    def to_dict(self):
        return {'id': self.id, 'lower_bound': self.lower_bound, 'upper_bound': self.upper_bound}

class Domain(db.Model):
    __tablename__ = 'domains'

    id = db.Column(db.Integer, primary_key=True)
    value = db.Column(db.String(100), unique=True, nullable=False)
    label = db.Column(db.String(255), nullable=False)
    mobile_label = db.Column(db.String(50))  # Short label for radar chart axes
    logo = db.Column(db.String(100), nullable=False)  # Icon reference

    def __repr__(self):
        return f'<Domain {self.value}>'

    def to_dict(self):
        return {
            'id': self.id,
            'value': self.value,
            'label': self.label,
            'mobile_label': self.mobile_label,
            'logo': self.logo,
        }

class Unit(db.Model):
    __tablename__ = 'units'

    id = db.Column(db.Integer, primary_key=True)
    value = db.Column(db.String(50), unique=True, nullable=False)
    label = db.Column(db.String(100), nullable=False)

    def __repr__(self):
        return f'<Unit {self.value}>'

    def to_dict(self):
        return {'id': self.id, 'value': self.value, 'label': self.label}

class UnitType(db.Model):
    __tablename__ = 'unit_types'

    id = db.Column(db.Integer, primary_key=True)
    value = db.Column(db.String(50), unique=True, nullable=False)
    label = db.Column(db.String(100), nullable=False)

    units = db.relationship(
        'Unit',
        secondary=unit_type_units,
        order_by=unit_type_units.c.position,
        lazy='selectin',
    )

    def __repr__(self):
        return f'<UnitType {self.value}>'

    def to_dict(self):
        return {
            'id': self.id,
            'value': self.value,
            'label': self.label,
            'units': [unit.to_dict() for unit in self.units],
        }

class Event(db.Model):
    __tablename__ = 'events'

    id = db.Column(db.Integer, primary_key=True)
    value = db.Column(db.String(100), unique=True, nullable=False)
    label = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    unit_type_id = db.Column(db.Integer, db.ForeignKey('unit_types.id'), nullable=False)
    domain_id = db.Column(db.Integer, db.ForeignKey('domains.id'), nullable=False, index=True)

    unit_type = db.relationship('UnitType', lazy='joined')
    domain = db.relationship('Domain', backref=db.backref('events', lazy='dynamic'), lazy='joined')

    def __repr__(self):
        return f'<Event {self.value}>'

    def to_dict(self):
        return {
            'id': self.id,
            'value': self.value,
            'label': self.label,
            'description': self.description,
            'unit_type': self.unit_type.value if self.unit_type else None,
            'domain': self.domain.value if self.domain else None,
        }

class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    first_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100))
    birthday = db.Column(db.String(10))  # ISO date string: YYYY, YYYY-MM or YYYY-MM-DD
    gender_id = db.Column(db.Integer, db.ForeignKey('genders.id'))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    gender = db.relationship('Gender', lazy='joined')

    def __repr__(self):
        return f'<User {self.id}: {self.email}>'

    def to_dict(self):
        """Convert user to dictionary for API responses"""
        return {
            'id': self.id,
            'email': self.email,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'birthday': self.birthday,
            'gender': self.gender.to_dict() if self.gender else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

class Submission(db.Model):
    __tablename__ = 'submissions'
    __table_args__ = (
        db.Index('ix_submissions_user_id', 'user_id'),
        db.Index('ix_submissions_created_at', 'created_at'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id'), nullable=False)
    raw_value = db.Column(db.String(50), nullable=False)  # Literal user input, kept for display
    value = db.Column(db.Float, nullable=False)  # Seconds for time events, magnitude otherwise
    unit_id = db.Column(db.Integer, db.ForeignKey('units.id'))  # Null for time events
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship('User', backref=db.backref('submissions', lazy='dynamic'))
    event = db.relationship('Event')
    unit = db.relationship('Unit')

    def __repr__(self):
        return f'<Submission {self.id}: user={self.user_id} event={self.event_id} value={self.value}>'

    def to_dict(self):
        """Convert submission to dictionary for API responses"""
        return {
            'id': self.id,
            'user_id': self.user_id,
            'event': self.event.value if self.event else None,
            'domain': self.event.domain.value if self.event and self.event.domain else None,
            'raw_value': self.raw_value,
            'value': self.value,
            'unit': self.unit.value if self.unit else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
