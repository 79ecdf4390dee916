"""Call-site rewriting for translate() and defineMessages() style helpers."""

from __future__ import annotations

import logging

from intlpass import builders as t
from intlpass.components import extends_component
from intlpass.config import PassOptions
from intlpass.host import StaticEvaluator
from intlpass.markup import DESCRIPTOR_PROPS
from intlpass.models import (
    ComponentKind,
    InvalidArgumentShapeError,
    MessageDescriptor,
    MissingIdError,
    StaticEvaluationError,
)
from intlpass.resolver import ImportReferenceResolver
from intlpass.session import TraversalSession
from intlpass.tree import Node, NodePath, is_node
from intlpass.validator import validate_message

logger = logging.getLogger(__name__)


def props_reference(kind: ComponentKind | None) -> Node:
    """``this.props`` inside class components, ``props`` everywhere else."""
    if kind is ComponentKind.CLASS_COMPONENT:
        return t.member_expression(t.this_expression(), t.identifier("props"))
    return t.identifier("props")


def _evaluate_string(evaluator: StaticEvaluator, path: NodePath) -> str | None:
    evaluation = evaluator.evaluate(path)
    if not evaluation.confident:
        raise StaticEvaluationError(
            "Messages must be statically evaluate-able for extraction.", path.node.loc
        )
    value = evaluation.value
    if value is None:
        return None
    if not isinstance(value, str):
        raise StaticEvaluationError(
            f"Message descriptor values must be strings, got {type(value).__name__}.",
            path.node.loc,
        )
    return value


class SingleMessageCall:
    """
    ``translate(id, options?, description?, props?)`` canonicalization.

    Missing trailing arguments are back-filled, then the call becomes
    ``translate.call(this, id, options, description, props)``.
    """

    def __init__(self, options: PassOptions, evaluator: StaticEvaluator) -> None:
        self.options = options
        self.evaluator = evaluator

    def rewrite(self, path: NodePath, session: TraversalSession) -> None:
        call = path.node
        args = call.arguments
        callee_name = call.callee.name

        if not args:
            raise MissingIdError(f"`{callee_name}()` requires a message id.", call.loc)
        if len(args) > 4:
            raise InvalidArgumentShapeError(
                f"`{callee_name}()` accepts at most four arguments, got {len(args)}.",
                call.loc,
            )

        descriptor = self._descriptor(path.get("arguments"))

        if len(args) < 2:
            args.append(t.object_expression())
        if len(args) < 3:
            args.append(t.null_literal())
        if len(args) < 4:
            args.append(props_reference(self._component_kind(path, session)))

        replacement = t.call_expression(
            t.member_expression(t.identifier(callee_name), t.identifier("call")),
            [t.this_expression(), *args],
        )
        replacement.loc = call.loc
        path.replace_with(replacement)
        logger.debug("Rewrote %s(%r) call", callee_name, descriptor.id)

        session.registry.register(
            descriptor,
            require_description=self.options.enforce_descriptions,
            loc=call.loc,
        )

    def register_canonical(self, path: NodePath, session: TraversalSession) -> None:
        """Register a call already in ``translate.call(this, ...)`` form."""
        call = path.node
        arg_paths = path.get("arguments")[1:]
        if not arg_paths:
            raise MissingIdError("`call()` of a translate helper requires a message id.", call.loc)
        session.registry.register(
            self._descriptor(arg_paths),
            require_description=self.options.enforce_descriptions,
            loc=call.loc,
        )

    def _component_kind(self, path: NodePath, session: TraversalSession) -> ComponentKind | None:
        """Class components are found by enclosing class, exported or not."""
        enclosing = path.find_parent(lambda p: p.is_("ClassDeclaration", "ClassExpression"))
        if enclosing is not None and extends_component(
            enclosing.node.get("superClass"), self.options.component_base_names
        ):
            return ComponentKind.CLASS_COMPONENT
        return session.current_kind

    def _descriptor(self, arg_paths: list[NodePath]) -> MessageDescriptor:
        message_id = _evaluate_string(self.evaluator, arg_paths[0])
        description = None
        if len(arg_paths) >= 3 and not arg_paths[2].is_("NullLiteral"):
            description = _evaluate_string(self.evaluator, arg_paths[2])
        return MessageDescriptor(id=message_id, description=description)


class BulkDescriptorCall:
    """
    ``defineMessages({...})`` / ``defineMessages([...])`` extraction.

    The array form is collapsed into a single object keyed by message id.
    """

    def __init__(self, options: PassOptions, evaluator: StaticEvaluator) -> None:
        self.options = options
        self.evaluator = evaluator

    def rewrite(self, path: NodePath, session: TraversalSession) -> None:
        call = path.node
        callee_name = call.callee.name
        arg_paths = path.get("arguments")

        if len(arg_paths) != 1 or not arg_paths[0].is_(
            "ObjectExpression", "ArrayExpression", "StringLiteral"
        ):
            raise InvalidArgumentShapeError(
                f"`{callee_name}()` must be called with an object expression with values "
                "that are React Intl Message Descriptors, also defined as object expressions.",
                call.loc,
            )

        arg = arg_paths[0]
        if arg.is_("StringLiteral"):
            return

        if arg.is_("ArrayExpression"):
            merged: dict[str, MessageDescriptor] = {}
            for element in arg.get("elements"):
                if not element.is_("ObjectExpression"):
                    raise self._shape_error(callee_name, element.node)
                descriptor = self._store(element, session)
                merged[descriptor.id] = descriptor
            merged_node = t.object_expression(
                [
                    t.object_property(t.property_key(message_id), t.value_to_node(d.to_dict()))
                    for message_id, d in merged.items()
                ]
            )
            merged_node.loc = arg.node.loc
            arg.replace_with(merged_node)
            logger.debug("Collapsed %d descriptors in %s([...])", len(merged), callee_name)
            return

        for prop in arg.get("properties"):
            if not prop.is_("ObjectProperty"):
                raise self._shape_error(callee_name, prop.node)
            value = prop.get("value")
            if not value.is_("ObjectExpression"):
                raise self._shape_error(callee_name, value.node)
            self._store(value, session)

    def _shape_error(self, callee_name: str, node: Node) -> InvalidArgumentShapeError:
        return InvalidArgumentShapeError(
            f"`{callee_name}()` values must be Message Descriptors defined as object "
            f"expressions, got {node.type}.",
            node.loc,
        )

    def _store(self, obj: NodePath, session: TraversalSession) -> MessageDescriptor:
        values: dict[str, str | None] = {}
        for prop in obj.get("properties"):
            if not prop.is_("ObjectProperty"):
                continue
            key = self._key(prop)
            if key not in DESCRIPTOR_PROPS:
                continue
            value = _evaluate_string(self.evaluator, prop.get("value"))
            values[key] = value.strip() if value is not None else None

        field = self.options.normalize_field
        if not values.get(field):
            values[field] = values.get("id")
        if values.get(field):
            values[field] = validate_message(values[field], loc=obj.node.loc)

        return session.registry.register(
            MessageDescriptor(
                id=values.get("id"),
                description=values.get("description"),
                default_message=values.get("defaultMessage"),
            ),
            require_description=self.options.enforce_descriptions,
            require_default_message=True,
            loc=obj.node.loc,
        )

    def _key(self, prop: NodePath) -> str | None:
        key = prop.node.key
        if not prop.node.get("computed"):
            if key.is_("Identifier"):
                return key.name
            if key.is_("StringLiteral"):
                return key.value
        evaluation = self.evaluator.evaluate(prop.get("key"))
        if not evaluation.confident:
            raise StaticEvaluationError(
                "Messages must be statically evaluate-able for extraction.", key.loc
            )
        return str(evaluation.value)


class CallSiteRewriter:
    """Picks the strategy for a call from what its callee resolves to."""

    def __init__(
        self,
        options: PassOptions,
        resolver: ImportReferenceResolver,
        evaluator: StaticEvaluator,
    ) -> None:
        self.options = options
        self.resolver = resolver
        self.single = SingleMessageCall(options, evaluator)
        self.bulk = BulkDescriptorCall(options, evaluator)

    def visit(self, path: NodePath, session: TraversalSession) -> None:
        callee = path.get("callee")
        if callee.is_("MemberExpression"):
            if self._is_canonical(path):
                self.single.register_canonical(path, session)
            return
        if self.resolver.references_import(
            callee, self.options.call_source_name, self.options.function_names
        ):
            self.single.rewrite(path, session)
        elif self.resolver.references_import(
            callee, self.options.markup_source_name, self.options.bulk_function_names
        ):
            self.bulk.rewrite(path, session)

    def _is_canonical(self, path: NodePath) -> bool:
        """``translate.call(this, ...)``, the output of a previous run."""
        callee = path.node.callee
        args = path.node.arguments
        if callee.get("computed") or not is_node(callee.property, "Identifier"):
            return False
        if callee.property.name != "call" or not args or not args[0].is_("ThisExpression"):
            return False
        return self.resolver.references_import(
            path.get("callee").get("object"),
            self.options.call_source_name,
            self.options.function_names,
        )
