"""
Analysis Engines (FINAL / FROZEN)

Engines own ALL numerical semantics. Steps own orchestration only.

Engine Responsibilities
-----------------------

DatasetLoadEngine        read / normalize / validate the input table
StandardizeEngine        (x - mean) / std with params fixed per reference frame
SplitEngine              seeded train/test partition + k-fold on train only
ModelFitEngine           OLS / Ridge / LASSO fits (see engines/model)
TuneEngine               λ × fold cross-validation, argmin mean RMSE
EvaluateEngine           RMSE, standardized RMSE, R² on held-out rows
AssumptionCheckEngine    normality diagnostics for targets / residuals
ComparisonReportEngine   method × target comparison tables


Engines MUST NOT:
- read configuration files
- write files or plots
- touch global random state

Engines MUST:
- raise WeavefitError subclasses with (method, target, λ) context
- return immutable results
"""
