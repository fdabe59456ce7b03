"""Neuroscreen screening services.

Each service owns one piece of the screening core:
- trial_engine: color/word executive-function trials
- cognitive_quiz: orientation quiz answer capture
- metric_sampler: fixed-cadence facial metric sampling
- risk_service: subscore normalization, aggregation and reporting
- explainability: transcript highlight annotation
"""
