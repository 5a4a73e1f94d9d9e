import django.contrib.auth.models
import django.contrib.auth.validators
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("is_superuser", models.BooleanField(default=False, help_text="Designates that this user has all permissions without explicitly assigning them.", verbose_name="superuser status")),
                ("username", models.CharField(error_messages={"unique": "A user with that username already exists."}, help_text="Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.", max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name="username")),
                ("first_name", models.CharField(blank=True, max_length=150, verbose_name="first name")),
                ("last_name", models.CharField(blank=True, max_length=150, verbose_name="last name")),
                ("is_staff", models.BooleanField(default=False, help_text="Designates whether the user can log into this admin site.", verbose_name="staff status")),
                ("is_active", models.BooleanField(default=True, help_text="Designates whether this user should be treated as active. Unselect this instead of deleting accounts.", verbose_name="active")),
                ("date_joined", models.DateTimeField(default=django.utils.timezone.now, verbose_name="date joined")),
                ("email", models.EmailField(max_length=254, unique=True, verbose_name="Email Address")),
                ("name", models.CharField(blank=True, default="", max_length=150, verbose_name="Full Name")),
                ("phone", models.CharField(blank=True, default="", max_length=20, verbose_name="Phone Number")),
                ("role", models.CharField(choices=[("client", "Client"), ("lawyer", "Lawyer"), ("police", "Police")], db_index=True, default="client", max_length=10, verbose_name="Role")),
                ("city", models.CharField(blank=True, db_index=True, default="", max_length=100, verbose_name="City")),
                ("specialization", models.JSONField(blank=True, default=list, help_text="List of case types the lawyer handles.", verbose_name="Specialization")),
                ("experience", models.PositiveSmallIntegerField(default=0, verbose_name="Years of Experience")),
                ("rating", models.DecimalField(decimal_places=2, default=0, max_digits=3, verbose_name="Rating")),
                ("description", models.TextField(blank=True, default="", verbose_name="Profile Description")),
                ("police_station_code", models.CharField(blank=True, default="", help_text="Code of the station this reviewer belongs to.", max_length=20, verbose_name="Police Station Code")),
                ("groups", models.ManyToManyField(blank=True, help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.", related_name="user_set", related_query_name="user", to="auth.group", verbose_name="groups")),
                ("user_permissions", models.ManyToManyField(blank=True, help_text="Specific permissions for this user.", related_name="user_set", related_query_name="user", to="auth.permission", verbose_name="user permissions")),
            ],
            options={
                "verbose_name": "User",
                "verbose_name_plural": "Users",
            },
            managers=[
                ("objects", django.contrib.auth.models.UserManager()),
            ],
        ),
    ]
