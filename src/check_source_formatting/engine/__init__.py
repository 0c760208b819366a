"""Line rule engine: rules, rule-set store, evaluation and messages."""
