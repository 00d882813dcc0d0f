
import json
import sys, os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from feedback_sentiment.pipelines.feedback_pipeline import build_analytics, import_feedback_csv

if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: run_feedback_analytics.py FEEDBACK.csv")
        sys.exit(2)
    records = import_feedback_csv(sys.argv[1])
    print(json.dumps(build_analytics(records), indent=2))
