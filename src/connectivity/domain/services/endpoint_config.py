"""Builds the psc_endpoints variable for the producer connectivity module."""

from __future__ import annotations

from typing import Any

from connectivity.domain.models.endpoint import AlloyDbProducer, CloudSqlProducer, PscEndpoint


PSC_ENDPOINTS_VAR = "psc_endpoints"

SAMPLE_ENDPOINT_PROJECT_ID = "endpoint-project-id"
SAMPLE_PRODUCER_INSTANCE_PROJECT_ID = "producer-instance-project-id"
SAMPLE_REGION = "us-central1"


class EndpointConfigBuilder:
    """Fluent builder for endpoint records sharing the same projects.

    Nothing is validated here; the module under test owns type and
    completeness checks.
    """

    def __init__(
        self,
        endpoint_project_id: str,
        producer_instance_project_id: str,
        region: str = SAMPLE_REGION,
    ) -> None:
        self._endpoint_project_id = endpoint_project_id
        self._producer_instance_project_id = producer_instance_project_id
        self._region = region
        self._endpoints: list[PscEndpoint] = []

    @property
    def endpoints(self) -> list[PscEndpoint]:
        return list(self._endpoints)

    def add_cloudsql(
        self,
        instance_name: str,
        network_name: str = "default",
        subnetwork_name: str = "default",
        ip_address_literal: str | None = None,
    ) -> EndpointConfigBuilder:
        return self.add(
            network_name=network_name,
            subnetwork_name=subnetwork_name,
            ip_address_literal=ip_address_literal,
            producer_cloudsql=CloudSqlProducer(instance_name=instance_name),
        )

    def add_alloydb(
        self,
        instance_name: str,
        cluster_id: str,
        network_name: str,
        subnetwork_name: str,
        ip_address_literal: str | None = None,
    ) -> EndpointConfigBuilder:
        return self.add(
            network_name=network_name,
            subnetwork_name=subnetwork_name,
            ip_address_literal=ip_address_literal,
            producer_alloydb=AlloyDbProducer(instance_name=instance_name, cluster_id=cluster_id),
        )

    def add_service_attachment(
        self,
        target: str,
        network_name: str,
        subnetwork_name: str,
        ip_address_literal: str | None = None,
    ) -> EndpointConfigBuilder:
        return self.add(
            network_name=network_name,
            subnetwork_name=subnetwork_name,
            ip_address_literal=ip_address_literal,
            target=target,
        )

    def add(self, **fields: Any) -> EndpointConfigBuilder:
        """Append a record with arbitrary producer fields, including none or several."""
        fields.setdefault("region", self._region)
        self._endpoints.append(
            PscEndpoint(
                endpoint_project_id=self._endpoint_project_id,
                producer_instance_project_id=self._producer_instance_project_id,
                **fields,
            )
        )
        return self

    def build(self) -> list[PscEndpoint]:
        return self.endpoints

    def build_tf_vars(self) -> dict[str, Any]:
        return build_tf_vars(self._endpoints)


def build_tf_vars(endpoints: list[PscEndpoint]) -> dict[str, Any]:
    """Return a fresh Terraform variable map for ``endpoints``."""
    return {PSC_ENDPOINTS_VAR: [endpoint.to_tf_var() for endpoint in endpoints]}


def sample_psc_endpoints() -> list[PscEndpoint]:
    """The reference fixture: two Cloud SQL, one service attachment, one AlloyDB."""
    return (
        EndpointConfigBuilder(SAMPLE_ENDPOINT_PROJECT_ID, SAMPLE_PRODUCER_INSTANCE_PROJECT_ID)
        .add_cloudsql("sql", ip_address_literal="10.128.0.5")
        .add_cloudsql("sql-1")
        .add_service_attachment(
            "projects/xxx-tp/regions/xx-central1/serviceAttachments/gkedpm-xxx",
            network_name="network",
            subnetwork_name="subnetwork",
        )
        .add_alloydb(
            "alloydb-id",
            cluster_id="alloydb-cid",
            network_name="alloydb-vpc",
            subnetwork_name="alloydb-subnet-1",
        )
        .build()
    )
