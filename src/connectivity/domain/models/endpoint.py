"""Private Service Connect endpoint domain models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from connectivity.domain.models.base import ValueObject


class ProducerKind(str, Enum):
    """Mechanisms an endpoint can use to reach its producer."""

    SERVICE_ATTACHMENT = "service_attachment"
    CLOUDSQL = "cloudsql"
    ALLOYDB = "alloydb"


# Variable key carrying each producer mechanism in a psc_endpoints record
PRODUCER_FIELDS: dict[ProducerKind, str] = {
    ProducerKind.SERVICE_ATTACHMENT: "target",
    ProducerKind.CLOUDSQL: "producer_cloudsql",
    ProducerKind.ALLOYDB: "producer_alloydb",
}


class CloudSqlProducer(ValueObject):
    """Reference to a Cloud SQL instance published over PSC."""

    instance_name: str


class AlloyDbProducer(ValueObject):
    """Reference to an AlloyDB instance published over PSC."""

    instance_name: str
    cluster_id: str


class PscEndpoint(ValueObject):
    """One entry of the module's ``psc_endpoints`` variable.

    Exactly one of ``target``, ``producer_cloudsql`` or ``producer_alloydb``
    is expected to be set. That rule belongs to the Terraform module and is
    not checked here, so tests can build records the module must reject.
    """

    endpoint_project_id: str
    producer_instance_project_id: str
    subnetwork_name: str
    network_name: str
    ip_address_literal: str | None = None  # None lets GCP allocate the address
    region: str
    target: str | None = None
    producer_cloudsql: CloudSqlProducer | None = None
    producer_alloydb: AlloyDbProducer | None = None

    @property
    def producer_kinds(self) -> list[ProducerKind]:
        return [
            kind for kind, field in PRODUCER_FIELDS.items()
            if getattr(self, field) is not None
        ]

    def to_tf_var(self) -> dict[str, Any]:
        """Render the record as a Terraform object value.

        ``ip_address_literal`` is always present (``null`` when unset); unset
        producer keys are left out so the module sees them as absent.
        """
        record = self.model_dump()
        for field in PRODUCER_FIELDS.values():
            if record[field] is None:
                del record[field]
        return record
