import logging
import random
import sys

from reference_data import load_reference_data
from similarity_engine import RiskAnalyzer, describe_verdict, live_feedback
from title_generator import generate_alternatives
from verification_log import build_verification_record, summarize_records

logging.basicConfig(level=logging.INFO)

titles = sys.argv[1:] or [
    'The Times of India',
    'Hindustan Tymes',
    'Police Gazette',
    'Morning Voice',
    'xy',
]

analyzer = RiskAnalyzer(load_reference_data())
rng = random.Random(0)
records = []

for title in titles:
    result = analyzer.analyze(title)
    verdict = describe_verdict(result)
    print(f'{title}: {verdict["score_text"]} ({verdict["headline"]}, preview: {live_feedback(result.score)})')
    for section in verdict['sections']:
        print(f'  {section["heading"]}:')
        for item in section['items']:
            print(f'    - {item}')
    if verdict['note']:
        print(f'  {verdict["note"]}')
    if result.risk != 'Low':
        print('  Alternatives:', ', '.join(generate_alternatives(title, rng)))
    records.append(build_verification_record(title, result, rng=rng))

print('\nDashboard:')
print(summarize_records(records))
