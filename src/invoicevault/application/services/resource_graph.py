"""Resource graph collection for cascading erasure."""

import logging

from invoicevault.application.dto.erasure_dto import ErasurePlan
from invoicevault.application.ports.repositories import ResourceRepository
from invoicevault.domain.entities import Document
from invoicevault.domain.exceptions import NotFound
from invoicevault.domain.value_objects import RelationType, ResourceKind, TypedId

logger = logging.getLogger(__name__)


async def collect_erasure_plan(
    resources: ResourceRepository, root: Document
) -> ErasurePlan:
    """Collect everything reachable from ``root`` that is erased with it.

    Walks an explicit worklist with a visited set, so cycles in ``related``
    links terminate and every resource is collected once. From each visited
    document the walk takes:

    - Binary and Invoice references in its content urls, and its invoices;
    - documents linked via ``related``, at any depth;
    - for the root only, the original it ``transforms``. The original's own
      graph is walked, but its transforms chain is not.

    Linked documents that no longer exist are logged and skipped.
    """
    root_id = root.typed_id
    visited: set[TypedId] = {root_id}
    binaries: set[TypedId] = set()
    invoices: set[TypedId] = set()
    documents: set[TypedId] = set()

    worklist: list[tuple[Document, bool]] = [(root, True)]
    while worklist:
        document, is_root = worklist.pop()
        logger.debug("Collecting resources linked from %s", document.typed_id)

        for attachment in document.content:
            ref = attachment.reference
            if ref is None:
                continue
            if ref.kind == ResourceKind.BINARY:
                binaries.add(ref)
            elif ref.kind == ResourceKind.INVOICE:
                invoices.add(ref)
            elif ref.kind == ResourceKind.DOCUMENT:
                documents.add(ref)
            else:
                logger.warning(
                    "Ignoring content reference %s of unhandled kind on %s",
                    ref,
                    document.typed_id,
                )
        for ref in document.invoices:
            invoices.add(ref)

        linked = [ref for ref in document.related if ref.kind == ResourceKind.DOCUMENT]
        if is_root:
            linked.extend(
                r.target
                for r in document.relates_to
                if r.code == RelationType.TRANSFORMS and r.target.kind == ResourceKind.DOCUMENT
            )

        for ref in linked:
            if ref in visited:
                continue
            visited.add(ref)
            documents.add(ref)
            try:
                child = await resources.read(ref)
            except NotFound:
                logger.warning("Linked document %s not found while collecting", ref)
                continue
            worklist.append((child, False))

    documents.discard(root_id)
    plan = ErasurePlan(
        root=root_id,
        binaries=frozenset(binaries),
        invoices=frozenset(invoices),
        documents=frozenset(documents),
    )
    logger.info(
        "Collected %d resource(s) for erasure of %s: %d binaries, %d invoices, %d documents",
        len(plan),
        root_id,
        len(plan.binaries),
        len(plan.invoices),
        len(plan.documents),
    )
    return plan
