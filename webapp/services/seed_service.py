"""
Demo Data Service

Fills a freshly created account with sample appointments, a week of health
readings, medications and documents so the dashboards have something to show.
"""

import logging
import random
import uuid

from config.models import APPOINTMENTS, MEDICATIONS, DOCUMENTS, HEALTH_DATA
from utils.date_converter import now_utc, to_iso, shift_days
from webapp.services.records_service import get_health_data

logger = logging.getLogger(__name__)

# Kenyan hospitals with the doctors who practise there
HOSPITALS = [
    {
        'name': 'Kenyatta National Hospital',
        'location': 'Hospital Road, Nairobi',
        'doctors': ['Dr. Wanjiku Kamau', 'Dr. Omondi Ochieng', 'Dr. Njeri Mwangi'],
    },
    {
        'name': 'Nairobi Hospital',
        'location': 'Argwings Kodhek Road, Nairobi',
        'doctors': ['Dr. Kipchoge Kipruto', 'Dr. Akinyi Otieno'],
    },
    {
        'name': 'Aga Khan University Hospital',
        'location': '3rd Parklands Avenue, Nairobi',
        'doctors': ['Dr. Muthoni Kariuki', 'Dr. Otieno Odinga'],
    },
    {
        'name': 'Moi Teaching and Referral Hospital',
        'location': 'Nandi Road, Eldoret',
        'doctors': ['Dr. Wambui Gathoni', 'Dr. James Maina'],
    },
    {
        'name': 'Coast General Hospital',
        'location': 'Moi Avenue, Mombasa',
        'doctors': ['Dr. Hassan Ali', 'Dr. Fatuma Said'],
    },
]


def sleep_quality(hours):
    if hours < 6.5:
        return 'poor'
    if hours < 7.5:
        return 'fair'
    if hours < 8.5:
        return 'good'
    return 'excellent'


def _has_data(storage, user_id):
    health = get_health_data(storage, user_id)
    return any([
        storage.records(APPOINTMENTS).list(user_id),
        storage.records(MEDICATIONS).list(user_id),
        storage.records(DOCUMENTS).list(user_id),
        health.get('bloodPressure'),
    ])


def _appointment(rng, title, date, notes, completed):
    hospital = rng.choice(HOSPITALS)
    return {
        'id': str(uuid.uuid4()),
        'title': title,
        'doctorName': rng.choice(hospital['doctors']),
        'location': f"{hospital['name']}, {hospital['location']}",
        'date': to_iso(date),
        'notes': notes,
        'completed': completed,
    }


def generate_demo_data(storage, user_id, now=None, rng=None):
    """
    Seed sample records for a user who has none yet.

    Args:
        storage (Storage): Target storage
        user_id (str): Owner of the generated records
        now (datetime, optional): Reference time (default: current UTC time)
        rng (random.Random, optional): Source of randomness

    Returns:
        bool: True if data was generated, False if the user already had data
    """
    if _has_data(storage, user_id):
        logger.info(f"User {user_id} already has data, skipping demo data generation")
        return False

    now = now or now_utc()
    rng = rng or random.Random()

    appointments = storage.records(APPOINTMENTS)
    appointments.create(user_id, _appointment(rng, 'General Checkup', shift_days(now, -14),
                                              'Annual physical examination', True))
    appointments.create(user_id, _appointment(rng, 'Dental Cleaning', shift_days(now, 7), '', False))
    appointments.create(user_id, _appointment(rng, 'Eye Examination', shift_days(now, 21),
                                              'Bring current glasses', False))

    health = {'bloodPressure': [], 'heartRate': [], 'weight': [], 'sleep': []}
    for days_ago in range(6, -1, -1):
        date = to_iso(shift_days(now, -days_ago))
        hours = rng.randint(60, 89) / 10
        health['bloodPressure'].append({
            'date': date,
            'systolic': rng.randint(110, 129),
            'diastolic': rng.randint(70, 84),
        })
        health['heartRate'].append({'date': date, 'value': rng.randint(60, 89)})
        health['weight'].append({'date': date, 'value': rng.randint(650, 669) / 10})
        health['sleep'].append({'date': date, 'hours': hours, 'quality': sleep_quality(hours)})
    storage.records(HEALTH_DATA).put_single(user_id, health)

    medications = storage.records(MEDICATIONS)
    medications.create(user_id, {
        'id': str(uuid.uuid4()),
        'name': 'Lisinopril',
        'dosage': '10mg',
        'frequency': 'Once daily',
        'startDate': to_iso(shift_days(now, -30)),
        'endDate': to_iso(shift_days(now, 60)),
        'instructions': 'Take in the morning with food',
        'reminderEnabled': True,
        'reminderTimes': ['08:00'],
    })
    medications.create(user_id, {
        'id': str(uuid.uuid4()),
        'name': 'Metformin',
        'dosage': '500mg',
        'frequency': 'Twice daily',
        'startDate': to_iso(shift_days(now, -15)),
        'instructions': 'Take with meals',
        'reminderEnabled': True,
        'reminderTimes': ['08:00', '20:00'],
    })
    medications.create(user_id, {
        'id': str(uuid.uuid4()),
        'name': 'Amoxicillin',
        'dosage': '500mg',
        'frequency': 'Three times daily',
        'startDate': to_iso(shift_days(now, -7)),
        'endDate': to_iso(shift_days(now, 7)),
        'instructions': 'Take until completed, even if feeling better',
        'reminderEnabled': True,
        'reminderTimes': ['08:00', '14:00', '20:00'],
    })

    documents = storage.records(DOCUMENTS)
    for days_ago, title, doc_type, notes in [
        (30, 'Annual Physical Examination', 'report', 'Routine annual physical examination report'),
        (15, 'Blood Test Results', 'lab_result', 'Complete blood count and metabolic panel'),
        (7, 'Prescription for Amoxicillin', 'prescription', 'For respiratory infection'),
    ]:
        documents.create(user_id, {
            'id': str(uuid.uuid4()),
            'title': title,
            'type': doc_type,
            'date': to_iso(shift_days(now, -days_ago)),
            'fileUrl': '',
            'notes': notes,
        })

    logger.info(f"Generated demo data for user {user_id}")
    return True
