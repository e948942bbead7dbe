"""
Integration tests for the ward patient API.

These tests exercise admission defaults, the optimistic version check,
the bulk operations and the role gating on destructive actions.  They
use Django REST Framework's APIClient within the APITestCase base class.

To run the tests:

```
pytest -q ward/tests
```
"""
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from ward.models import AuditEvent, Collaborator, Patient


class PatientAPITests(APITestCase):
    def setUp(self) -> None:
        self.nurse = Collaborator.objects.create_user(
            "700", password="2468", name="ENFERMEIRA ANA", role=Collaborator.ROLE_ENFERMEIRO,
        )
        self.technician = Collaborator.objects.create_user(
            "701", password="2468", name="TÉCNICO JOÃO", role=Collaborator.ROLE_TECNICO,
        )
        self.p1 = Patient.objects.create(id="p1", name="Ana Souza", pendencies="Sem dieta")
        self.p2 = Patient.objects.create(id="p2", name="Bruno Lima")
        self.p3 = Patient.objects.create(id="p3", name="Carla Dias")

    def authenticate(self, user: Collaborator) -> APIClient:
        """Return an authenticated APIClient for the given collaborator."""
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    def test_create_with_upa_status_requests_transfer(self):
        client = self.authenticate(self.nurse)
        response = client.post("/api/patients", {
            "name": "Maria Silva",
            "status": "Transferência UPA",
            "pendencies": "Nenhuma",
            "isTransferRequested": False,
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data["data"]
        self.assertTrue(data["isNew"])
        self.assertTrue(data["isTransferRequested"])
        self.assertFalse(data["isTransferred"])
        self.assertEqual(data["transferDestinationSector"], "Transferência UPA")
        self.assertEqual(data["transferDestinationBed"], "UPA")
        self.assertIsNotNone(data["transferRequestedAt"])
        self.assertIsNotNone(data["upaTransferRequestedAt"])
        self.assertIsNone(data["externalTransferRequestedAt"])
        self.assertIsNotNone(data["pendenciesResolvedAt"])
        self.assertEqual(data["createdBy"], "700 - ENFERMEIRA ANA")
        self.assertEqual(data["lastModifiedBy"], "700 - ENFERMEIRA ANA")
        self.assertEqual(data["version"], 1)

    def test_create_external_transfer_waits_for_bed(self):
        client = self.authenticate(self.technician)
        response = client.post("/api/patients", {
            "name": "Paulo Reis", "status": "Transferência Externa", "pendencies": "Sem dieta",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data["data"]
        self.assertEqual(data["transferDestinationBed"], "AGUARDANDO")
        self.assertIsNotNone(data["externalTransferRequestedAt"])
        self.assertIsNone(data["pendenciesResolvedAt"])

    def test_client_cannot_write_bookkeeping_fields(self):
        client = self.authenticate(self.nurse)
        response = client.post("/api/patients", {
            "id": "p2", "notes": "<b>sem acesso</b> venoso",
            "lastModifiedBy": "999 - OUTRO", "transferredAt": "2020-01-01T00:00:00Z",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.p2.refresh_from_db()
        self.assertEqual(self.p2.last_modified_by, "700 - ENFERMEIRA ANA")
        self.assertIsNone(self.p2.transferred_at)
        self.assertEqual(self.p2.notes, "sem acesso venoso")

    def test_update_resolving_pendency_stamps_time(self):
        client = self.authenticate(self.technician)
        response = client.post("/api/patients", {"id": "p1", "pendencies": "Nenhuma"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["created"])
        self.p1.refresh_from_db()
        self.assertIsNotNone(self.p1.pendencies_resolved_at)
        self.assertEqual(self.p1.version, 2)
        self.assertTrue(AuditEvent.objects.filter(action="patient_update", object_id="p1").exists())

    def test_stale_version_is_rejected(self):
        client = self.authenticate(self.nurse)
        first = client.post("/api/patients", {"id": "p2", "version": 1, "notes": "primeira"}, format="json")
        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data["data"]["version"], 2)

        stale = client.post("/api/patients", {"id": "p2", "version": 1, "notes": "segunda"}, format="json")
        self.assertEqual(stale.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(stale.data["error"]["code"], "edit_conflict")
        self.assertEqual(stale.data["error"]["currentVersion"], 2)
        self.p2.refresh_from_db()
        self.assertEqual(self.p2.notes, "primeira")
        self.assertTrue(AuditEvent.objects.filter(action="patient_conflict", object_id="p2").exists())

    def test_bulk_delete_removes_exactly_given_ids(self):
        client = self.authenticate(self.nurse)
        response = client.post("/api/patients/bulk-delete", {"ids": ["p1", "p3", "missing"]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["deleted"], 2)
        self.assertEqual(list(Patient.objects.values_list("id", flat=True)), ["p2"])

    def test_bulk_delete_requires_ids(self):
        client = self.authenticate(self.nurse)
        response = client.post("/api/patients/bulk-delete", {"ids": []}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Patient.objects.count(), 3)

    def test_technician_cannot_delete_patients(self):
        client = self.authenticate(self.technician)
        self.assertEqual(client.delete("/api/patients/p1").status_code, status.HTTP_403_FORBIDDEN)
        response = client.post("/api/patients/bulk-delete", {"ids": ["p1"]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Patient.objects.filter(id="p1").exists())

    def test_nurse_deletes_single_patient(self):
        client = self.authenticate(self.nurse)
        response = client.delete("/api/patients/p1")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["deleted"], 1)
        self.assertFalse(Patient.objects.filter(id="p1").exists())

    def test_bulk_discharge_refused_while_waiting_for_social_worker(self):
        Patient.objects.filter(id="p2").update(pendencies=Patient.PENDENCY_SOCIAL_WORKER)
        client = self.authenticate(self.nurse)
        response = client.post("/api/patients/bulk-discharge", {"ids": ["p2", "p3"]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "discharge_blocked")
        self.assertIn("Bruno Lima", response.data["error"]["message"])
        self.assertFalse(Patient.objects.filter(is_transferred=True).exists())

    def test_bulk_discharge_archives_patients(self):
        client = self.authenticate(self.nurse)
        response = client.post("/api/patients/bulk-discharge", {"ids": ["p2", "p3"]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["discharged"], 2)
        for patient in Patient.objects.filter(id__in=["p2", "p3"]):
            self.assertEqual(patient.status, Patient.STATUS_ALTA)
            self.assertTrue(patient.is_transferred)
            self.assertIsNotNone(patient.transferred_at)

    def test_technician_cannot_discharge(self):
        client = self.authenticate(self.technician)
        response = client.post("/api/patients/bulk-discharge", {"ids": ["p2"]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_finish_external_transfer_requires_destination(self):
        Patient.objects.filter(id="p3").update(
            status=Patient.STATUS_TRANSFER_EXTERNAL, is_transfer_requested=True,
        )
        client = self.authenticate(self.technician)
        response = client.post("/api/patients/p3/finish-transfer", {"destination": "  "}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = client.post("/api/patients/p3/finish-transfer", {"destination": "hospital das clínicas"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.p3.refresh_from_db()
        self.assertTrue(self.p3.is_transferred)
        self.assertEqual(self.p3.transfer_destination_bed, "HOSPITAL DAS CLÍNICAS")
        self.assertIsNotNone(self.p3.transferred_at)

    def test_bulk_update_applies_bookkeeping(self):
        client = self.authenticate(self.technician)
        response = client.post("/api/patients/bulk-update", {
            "ids": ["p1", "p2"], "updates": {"isTransferRequested": True, "transferDestinationSector": "CTI"},
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["updated"], 2)
        for patient in Patient.objects.filter(id__in=["p1", "p2"]):
            self.assertTrue(patient.is_transfer_requested)
            self.assertIsNotNone(patient.transfer_requested_at)
            self.assertEqual(patient.last_modified_by, "701 - TÉCNICO JOÃO")

    def test_list_scopes(self):
        Patient.objects.filter(id="p3").update(is_transferred=True)
        client = self.authenticate(self.technician)
        active = client.get("/api/patients", {"scope": "active"})
        finalized = client.get("/api/patients", {"scope": "finalized"})
        self.assertEqual([p["id"] for p in active.data], ["p1", "p2"])
        self.assertEqual([p["id"] for p in finalized.data], ["p3"])
        found = client.get("/api/patients", {"q": "brun"})
        self.assertEqual([p["id"] for p in found.data], ["p2"])

    def test_mark_seen_clears_new_flag(self):
        Patient.objects.update(is_new=True)
        client = self.authenticate(self.nurse)
        response = client.post("/api/patients/mark-seen", {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["updated"], 3)
        self.assertFalse(Patient.objects.filter(is_new=True).exists())
