#python revalidate_week_drafts.py 2025-01-05
#Revalidate a week's drafts on a running server and summarise what is still blocked
import sys
from collections import Counter

import requests

BASE_URL = "http://localhost:5000"


def revalidate_week(week_start):
    print("=" * 60)
    print(f"Revalidating draft appointments for week {week_start}...")
    print("=" * 60)
    
    try:
        response = requests.post(
            f"{BASE_URL}/api/draft-appointments/revalidate",
            json={'week_start': week_start},
            timeout=30
        )
    except requests.RequestException as e:
        print(f"  → request failed: {e}")
        return 1
    
    if response.status_code != 200:
        print(f"  → error: {response.status_code} {response.text}")
        return 1
    
    drafts = response.json().get('data', {}).get('drafts', [])
    
    kinds = Counter()
    invalid = [d for d in drafts if d['validation_status'] == 'invalid']
    
    for draft in invalid:
        print(f"Draft {draft['draft_id']} ({draft['client_name']}, {draft['start_time']}):")
        for kind, messages in draft['grouped_errors'].items():
            kinds[kind] += 1
            for message in messages:
                print(f"  - [{kind}] {message}")
    
    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)
    print(f"Revalidated: {len(drafts)}")
    print(f"Valid: {len(drafts) - len(invalid)}")
    print(f"Invalid: {len(invalid)}")
    for kind, count in kinds.most_common():
        print(f"  {kind}: {count}")
    print("=" * 60)
    
    return 0


if __name__ == '__main__':
    if len(sys.argv) != 2:
        print("usage: python revalidate_week_drafts.py YYYY-MM-DD")
        sys.exit(2)
    sys.exit(revalidate_week(sys.argv[1]))
