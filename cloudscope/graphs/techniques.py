"""Static catalog of known AWS privilege-escalation techniques.

Each entry lists the IAM actions the technique needs; `match_techniques`
in `cloudscope.graphs.escalation` uses them to pick the techniques a
permission profile can actually perform.
"""

from __future__ import annotations

from typing import Tuple

from ..core.models import EscalationTechnique

POLICY_MANIPULATION = "policy-manipulation"
PASSROLE_EXECUTION = "passrole-execution"
CREDENTIAL_EXPOSURE = "credential-exposure"
RESOURCE_HIJACK = "resource-hijack"
LATERAL_MOVEMENT = "lateral-movement"

TECHNIQUES: Tuple[EscalationTechnique, ...] = (
    EscalationTechnique(
        id="create_policy_version",
        name="Create Policy Version",
        description="Publish a new default version of an attached managed policy granting admin rights",
        type=POLICY_MANIPULATION,
        risk="Critical",
        permissions=("iam:CreatePolicyVersion",),
    ),
    EscalationTechnique(
        id="set_default_policy_version",
        name="Set Default Policy Version",
        description="Roll an attached policy back to a more permissive existing version",
        type=POLICY_MANIPULATION,
        risk="High",
        permissions=("iam:SetDefaultPolicyVersion",),
    ),
    EscalationTechnique(
        id="attach_user_policy",
        name="Attach User Policy",
        description="Attach AdministratorAccess to the current user",
        type=POLICY_MANIPULATION,
        risk="Critical",
        permissions=("iam:AttachUserPolicy",),
    ),
    EscalationTechnique(
        id="put_user_policy",
        name="Put User Policy",
        description="Write an inline admin policy onto the current user",
        type=POLICY_MANIPULATION,
        risk="Critical",
        permissions=("iam:PutUserPolicy",),
    ),
    EscalationTechnique(
        id="attach_role_policy",
        name="Attach Role Policy",
        description="Attach an admin policy to a role the principal can assume",
        type=POLICY_MANIPULATION,
        risk="High",
        permissions=("iam:AttachRolePolicy",),
    ),
    EscalationTechnique(
        id="add_user_to_group",
        name="Add User To Group",
        description="Join a group that already holds elevated permissions",
        type=POLICY_MANIPULATION,
        risk="High",
        permissions=("iam:AddUserToGroup",),
    ),
    EscalationTechnique(
        id="create_access_key",
        name="Create Access Key",
        description="Mint access keys for a more privileged user",
        type=CREDENTIAL_EXPOSURE,
        risk="High",
        permissions=("iam:CreateAccessKey",),
    ),
    EscalationTechnique(
        id="create_login_profile",
        name="Create Login Profile",
        description="Set a console password on a user that has none",
        type=CREDENTIAL_EXPOSURE,
        risk="High",
        permissions=("iam:CreateLoginProfile",),
    ),
    EscalationTechnique(
        id="update_login_profile",
        name="Update Login Profile",
        description="Reset another user's console password",
        type=CREDENTIAL_EXPOSURE,
        risk="High",
        permissions=("iam:UpdateLoginProfile",),
    ),
    EscalationTechnique(
        id="passrole_ec2",
        name="PassRole to EC2",
        description="Launch an instance with a privileged instance profile and read its credentials from IMDS",
        type=PASSROLE_EXECUTION,
        risk="High",
        permissions=("iam:PassRole", "ec2:RunInstances"),
    ),
    EscalationTechnique(
        id="passrole_lambda",
        name="PassRole to Lambda",
        description="Create and invoke a function that runs as a privileged role",
        type=PASSROLE_EXECUTION,
        risk="High",
        permissions=("iam:PassRole", "lambda:CreateFunction", "lambda:InvokeFunction"),
    ),
    EscalationTechnique(
        id="passrole_cloudformation",
        name="PassRole to CloudFormation",
        description="Deploy a stack whose service role creates admin resources",
        type=PASSROLE_EXECUTION,
        risk="High",
        permissions=("iam:PassRole", "cloudformation:CreateStack"),
    ),
    EscalationTechnique(
        id="update_function_code",
        name="Update Lambda Code",
        description="Replace the code of a function that already runs with a privileged role",
        type=RESOURCE_HIJACK,
        risk="Medium",
        permissions=("lambda:UpdateFunctionCode",),
    ),
    EscalationTechnique(
        id="update_assume_role_policy",
        name="Update Assume Role Policy",
        description="Rewrite a role's trust policy so the principal can assume it",
        type=LATERAL_MOVEMENT,
        risk="High",
        permissions=("iam:UpdateAssumeRolePolicy", "sts:AssumeRole"),
    ),
    EscalationTechnique(
        id="secretsmanager_get_value",
        name="Read Secrets",
        description="Read stored secrets that contain credentials for other principals",
        type=CREDENTIAL_EXPOSURE,
        risk="Medium",
        permissions=("secretsmanager:GetSecretValue",),
    ),
)
