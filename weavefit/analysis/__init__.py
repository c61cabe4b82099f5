"""
Analysis Doctrine (FINAL / FROZEN)

One analysis run compares three linear model families on two targets of
the weaving dataset. It is a one-shot batch comparison, nothing more.

------------------------------------------------------------
Run Semantics
------------------------------------------------------------

Definition:
- AnalysisUnit = (method, target)
- Methods      = OLS, Ridge, LASSO
- Targets      = Total_Pdn_yds, Rejection

Flow:
    load → schema → validate config → target assumptions
    for each target:
        split → standardize → folds → fit (+ tune) → evaluate → residuals
    compare → CV curves → persist

Rules:
- The other target is NEVER a predictor. Feature roles are explicit
  (FeatureSchema), never "all other columns" implicitly.
- Seeds are explicit inputs. Each target derives its own split / fold
  seeds from the run seed, so Production and Rejection see DIFFERENT
  train/test partitions. All methods of one target share ONE partition.
- Folds are built once per target and reused for every lambda.
- Test rows never enter fold construction.


------------------------------------------------------------
Standardization Scope
------------------------------------------------------------

analysis.scaling_scope = "full" (default)
    Parameters from the full table before splitting. Reproduces the
    reference analysis; leaks test-set moments into the scaling.

analysis.scaling_scope = "train"
    Parameters from the training partition only, applied to test.

Either way parameters are computed once per reference frame and never
per CV fold.


------------------------------------------------------------
Failure Isolation
------------------------------------------------------------

- ConfigurationError aborts the run at setup, before any fit.
- DataIntegrityError aborts ONE (method, target) pair
  (or every method of a target when the target-level data is broken).
- NumericalInstabilityError inside tuning drops ONE lambda; it is fatal
  for the pair only when every lambda fails.
- Sibling pairs always keep running; every failure is reported.
"""
