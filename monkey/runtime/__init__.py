"""Runtime: object model, environments, operators, built-ins and the evaluator."""
