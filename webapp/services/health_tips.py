"""
Health Tips Service

Catalogue search and tips personalised from a user's profile, latest
readings and medications.
"""

import logging

from config.models import PROFILES, MEDICATIONS
from utils.date_converter import now_utc
from webapp.services.records_service import get_health_data

logger = logging.getLogger(__name__)

HEALTH_TIPS = [
    {
        'id': '1',
        'title': 'Understanding Blood Pressure Readings',
        'description': 'Learn how to interpret your blood pressure numbers and what they mean for your health.',
        'category': 'Heart Health',
        'source': 'Mayo Clinic',
        'url': 'https://www.mayoclinic.org/diseases-conditions/high-blood-pressure/in-depth/blood-pressure/art-20050982',
    },
    {
        'id': '2',
        'title': 'The Importance of Regular Exercise',
        'description': 'Discover how just 30 minutes of daily exercise can significantly improve your overall health.',
        'category': 'Fitness',
        'source': 'World Health Organization',
        'url': 'https://www.who.int/news-room/fact-sheets/detail/physical-activity',
    },
    {
        'id': '3',
        'title': 'Nutrition Basics: Building a Balanced Diet',
        'description': 'A comprehensive guide to understanding nutrition labels and creating balanced meals.',
        'category': 'Nutrition',
        'source': 'Harvard Health',
        'url': 'https://www.health.harvard.edu/staying-healthy/the-right-plant-based-diet-for-you',
    },
    {
        'id': '4',
        'title': 'Managing Diabetes: Daily Tips',
        'description': 'Practical advice for monitoring blood sugar and maintaining a healthy lifestyle with diabetes.',
        'category': 'Chronic Conditions',
        'source': 'American Diabetes Association',
        'url': 'https://www.diabetes.org/healthy-living',
    },
    {
        'id': '5',
        'title': 'Sleep Hygiene: Tips for Better Rest',
        'description': 'Improve your sleep quality with these evidence-based practices for better sleep hygiene.',
        'category': 'Sleep',
        'source': 'Sleep Foundation',
        'url': 'https://www.sleepfoundation.org/sleep-hygiene',
    },
    {
        'id': '6',
        'title': 'Understanding Preventive Healthcare',
        'description': 'Why regular check-ups and screenings are essential for maintaining good health.',
        'category': 'Preventive Care',
        'source': 'CDC',
        'url': 'https://www.cdc.gov/prevention/index.html',
    },
    {
        'id': '7',
        'title': 'Managing Chronic Pain Naturally',
        'description': 'Non-medication approaches to help manage and reduce chronic pain symptoms.',
        'category': 'Pain Management',
        'source': 'National Center for Complementary and Integrative Health',
        'url': 'https://www.nccih.nih.gov/health/chronic-pain-in-depth',
    },
    {
        'id': '8',
        'title': 'Boosting Your Immune System',
        'description': "Natural ways to strengthen your body's defenses against illness.",
        'category': 'Immunity',
        'source': 'Harvard Health',
        'url': 'https://www.health.harvard.edu/staying-healthy/how-to-boost-your-immune-system',
    },
    {
        'id': '9',
        'title': 'Mental Health: Breaking the Stigma',
        'description': 'Understanding mental health conditions and the importance of seeking help.',
        'category': 'Mental Health',
        'source': 'National Alliance on Mental Illness',
        'url': 'https://www.nami.org/About-Mental-Illness',
    },
    {
        'id': '10',
        'title': 'Heart-Healthy Habits for Every Age',
        'description': 'Cardiovascular health tips that are beneficial at any stage of life.',
        'category': 'Heart Health',
        'source': 'American Heart Association',
        'url': 'https://www.heart.org/en/healthy-living',
    },
]

DEFAULT_TIPS = [
    {'id': 'default1', 'title': 'Stay Hydrated',
     'description': 'Drink at least 8 glasses of water daily for optimal health.',
     'category': 'General Health', 'priority': 'medium'},
    {'id': 'default2', 'title': 'Regular Exercise',
     'description': 'Aim for at least 30 minutes of moderate activity most days of the week.',
     'category': 'Fitness', 'priority': 'high'},
    {'id': 'default3', 'title': 'Balanced Diet',
     'description': 'Include a variety of fruits, vegetables, whole grains, and lean proteins in your meals.',
     'category': 'Nutrition', 'priority': 'high'},
    {'id': 'default4', 'title': 'Adequate Sleep',
     'description': 'Most adults need 7-9 hours of quality sleep each night for good health.',
     'category': 'Sleep', 'priority': 'medium'},
    {'id': 'default5', 'title': 'Stress Management',
     'description': 'Practice relaxation techniques like deep breathing, meditation, or yoga.',
     'category': 'Mental Health', 'priority': 'medium'},
]

PRIORITY_ORDER = {'high': 0, 'medium': 1, 'low': 2}


def search_tips(query, today=None):
    """
    Filter the catalogue on title, description and category.

    A non-empty query also yields two research/guideline pointers for the
    query itself, appended after the catalogue matches.
    """
    query = (query or '').strip()
    if not query:
        return list(HEALTH_TIPS)

    lowered = query.lower()
    results = [
        tip for tip in HEALTH_TIPS
        if lowered in tip['title'].lower()
        or lowered in tip['description'].lower()
        or lowered in tip['category'].lower()
    ]

    date = (today or now_utc()).strftime('%Y-%m-%d')
    results.extend([
        {
            'id': 'ext1',
            'title': f"{query} - Latest Research",
            'description': f"Recent findings about {query} and its impact on health.",
            'category': 'Research',
            'date': date,
            'source': 'PubMed',
            'url': 'https://pubmed.ncbi.nlm.nih.gov/',
        },
        {
            'id': 'ext2',
            'title': f"{query} Health Guidelines",
            'description': f"Official health guidelines related to {query}.",
            'category': 'Guidelines',
            'date': date,
            'source': 'WebMD',
            'url': 'https://www.webmd.com/',
        },
    ])
    return results


def _age_tip(age):
    if age < 30:
        return {'id': 'age1', 'title': 'Building Healthy Habits in Your 20s',
                'description': 'Establishing good health habits now can set you up for a lifetime of wellbeing.',
                'category': 'Age-Specific', 'priority': 'high'}
    if age < 50:
        return {'id': 'age2', 'title': 'Health Screenings in Your 30s and 40s',
                'description': 'Key health screenings you should consider at this stage of life.',
                'category': 'Age-Specific', 'priority': 'high'}
    return {'id': 'age3', 'title': 'Staying Active as You Age',
            'description': 'How to maintain mobility and strength in your 50s and beyond.',
            'category': 'Age-Specific', 'priority': 'high'}


def body_mass_index(height_cm, weight_kg):
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)


def personalized_tips(storage, user_id):
    """
    Tips chosen from the user's age, latest blood pressure, BMI and
    medications, ordered high priority first. Stored values that cannot be
    compared (a string age, say) fall back to the first three default tips.
    """
    profile = storage.records(PROFILES).find(lambda p: p.get('id') == user_id)
    if not profile:
        return list(DEFAULT_TIPS)

    try:
        tips = _tips_for(profile, get_health_data(storage, user_id), storage.records(MEDICATIONS).list(user_id))
    except (TypeError, ValueError, ZeroDivisionError) as e:
        logger.error(f"Could not personalize tips for user {user_id}: {e}")
        return DEFAULT_TIPS[:3]

    logger.info(f"Built {len(tips)} personalized tips for user {user_id}")
    return tips


def _tips_for(profile, health, medications):
    tips = []

    if profile.get('age'):
        tips.append(_age_tip(profile['age']))

    readings = health.get('bloodPressure') or []
    if readings:
        latest = readings[-1]
        if latest.get('systolic', 0) > 130 or latest.get('diastolic', 0) > 80:
            tips.append({'id': 'bp1', 'title': 'Managing Your Blood Pressure',
                         'description': 'Lifestyle changes and strategies to help lower your blood pressure naturally.',
                         'category': 'Heart Health', 'priority': 'high'})

    if profile.get('height') and profile.get('weight'):
        if body_mass_index(profile['height'], profile['weight']) > 25:
            tips.append({'id': 'weight1', 'title': 'Healthy Weight Management Strategies',
                         'description': 'Sustainable approaches to reaching and maintaining a healthy weight.',
                         'category': 'Weight Management', 'priority': 'medium'})

    if medications:
        tips.append({'id': 'med1', 'title': 'Medication Adherence Tips',
                     'description': 'Strategies to help you remember to take your medications as prescribed.',
                     'category': 'Medication Management', 'priority': 'high'})

    tips.append({'id': 'gen1', 'title': 'Staying Hydrated',
                 'description': 'The importance of proper hydration for overall health and wellbeing.',
                 'category': 'General Health', 'priority': 'medium'})
    tips.append({'id': 'gen2', 'title': 'Stress Management Techniques',
                 'description': 'Simple practices to reduce stress and improve mental wellbeing.',
                 'category': 'Mental Health', 'priority': 'medium'})

    tips.sort(key=lambda tip: PRIORITY_ORDER[tip['priority']])
    return tips
