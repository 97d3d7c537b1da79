"""
Python source export of trained ensembles.

The generated code has no dependencies: one class per weak learner with a
``classify(x)`` static method returning a class index, and a top-level
class that combines them with the ensemble's voting weights. Only decision
tree learners can be exported.
"""

import numpy as np
from sklearn.tree import DecisionTreeClassifier
from sklearn.utils.validation import check_is_fitted

INDENT = "    "


def _literal(value: float) -> str:
    if np.isnan(value):
        return 'float("nan")'
    if np.isinf(value):
        return 'float("inf")' if value > 0 else '-float("inf")'
    return repr(float(value))


def _check_sourcable(learner) -> None:
    if not isinstance(learner, DecisionTreeClassifier) or not hasattr(learner, "tree_"):
        raise ValueError(
            f"Base learner {type(learner).__module__}.{type(learner).__name__} "
            "is not sourcable"
        )


def tree_to_source(learner: DecisionTreeClassifier, class_name: str) -> str:
    """
    Render a fitted decision tree as nested ``if`` statements.

    Parameters
    ----------
    learner : DecisionTreeClassifier
        Fitted tree trained on encoded class indices.
    class_name : str
        Name of the generated class.

    Returns
    -------
    source : str
        Python source of a class with a ``classify(x)`` static method.
    """
    _check_sourcable(learner)
    tree = learner.tree_
    classes = np.asarray(learner.classes_)

    lines = [f"class {class_name}:", "", f"{INDENT}@staticmethod", f"{INDENT}def classify(x):"]

    def recurse(node, depth):
        pad = INDENT * depth
        left = tree.children_left[node]
        right = tree.children_right[node]
        if left == right:
            label = int(classes[np.argmax(tree.value[node][0])])
            lines.append(f"{pad}return {label}")
            return
        lines.append(
            f"{pad}if x[{int(tree.feature[node])}] <= {_literal(tree.threshold[node])}:"
        )
        recurse(left, depth + 1)
        lines.append(f"{pad}else:")
        recurse(right, depth + 1)

    recurse(0, 2)
    return "\n".join(lines) + "\n"


def ensemble_to_source(model, class_name: str) -> str:
    """
    Render a fitted ``SMOTEBoost`` model as standalone Python source.

    ``classify(x)`` of the generated class returns the index of the
    predicted class in ``model.classes_``.

    Raises
    ------
    NotFittedError
        If the model has not been fitted.
    ValueError
        If a weak learner is not a fitted decision tree.
    """
    check_is_fitted(model, "n_rounds_performed_")

    if model.fallback_ is not None:
        label = int(np.argmax(model.fallback_.class_prior_))
        return "\n".join([
            f"class {class_name}:",
            "",
            f"{INDENT}@staticmethod",
            f"{INDENT}def classify(x):",
            f"{INDENT * 2}return {label}",
        ]) + "\n"

    for learner in model.estimators_:
        _check_sourcable(learner)

    body = []
    if model.n_rounds_performed_ == 1:
        body.append(f"{INDENT * 2}return {class_name}_0.classify(x)")
    else:
        body.append(f"{INDENT * 2}sums = [0.0] * {model.n_classes_}")
        for i, beta in enumerate(model.estimator_weights_):
            body.append(
                f"{INDENT * 2}sums[{class_name}_{i}.classify(x)] += {_literal(beta)}"
            )
        body.append(
            f"{INDENT * 2}return max(range({model.n_classes_}), key=lambda j: sums[j])"
        )

    text = "\n".join(
        [f"class {class_name}:", "", f"{INDENT}@staticmethod", f"{INDENT}def classify(x):"]
        + body
    ) + "\n"

    for i, learner in enumerate(model.estimators_):
        text += "\n\n" + tree_to_source(learner, f"{class_name}_{i}")
    return text
